"""initial_schema

Create the linkage schema:
- User Credentials (third-party accounts linked to local users)
- User Identities (login lookup mirror, one row per login provider account)

Revision ID: 3c1f0a9d2b47
Revises:
Create Date: 2026-10-18 10:12:44.508211

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _link_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("auth_scheme", sa.String(20), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=False),
        sa.Column(
            "profile",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "credentials",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "modified",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # USER_CREDENTIALS table
    # ========================================================================
    op.create_table(
        "user_credentials",
        *_link_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider", "external_id", name="uq_credential_link"),
    )
    op.create_index("idx_user_credentials_user_id", "user_credentials", ["user_id"])
    op.create_index(
        "idx_user_credentials_user_link",
        "user_credentials",
        ["user_id", "provider", "external_id"],
    )

    # ========================================================================
    # USER_IDENTITIES table
    # ========================================================================
    op.create_table(
        "user_identities",
        *_link_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider", "external_id", name="uq_identity_provider"),
    )
    op.create_index("idx_user_identities_user_id", "user_identities", ["user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_user_identities_user_id", table_name="user_identities")
    op.drop_table("user_identities")
    op.drop_index("idx_user_credentials_user_link", table_name="user_credentials")
    op.drop_index("idx_user_credentials_user_id", table_name="user_credentials")
    op.drop_table("user_credentials")
