"""SQLAlchemy table definitions for linkage.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USER CREDENTIALS TABLE (third-party accounts linked to users)
# ============================================================================
user_credentials_table = Table(
    "user_credentials",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")
    ),
    Column("user_id", UUID, nullable=False),  # Owned by the host user store
    Column("provider", String(50), nullable=False),  # 'github', 'facebook-link'
    Column("auth_scheme", String(20), nullable=False),  # 'oAuth 2.0', 'OpenID'
    Column("external_id", String(255), nullable=False),
    Column("profile", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column("credentials", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "created", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "modified", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    # Cross-process tie-breaker for concurrent first links
    UniqueConstraint("provider", "external_id", name="uq_credential_link"),
)

Index("idx_user_credentials_user_id", user_credentials_table.c.user_id)
Index(
    "idx_user_credentials_user_link",
    user_credentials_table.c.user_id,
    user_credentials_table.c.provider,
    user_credentials_table.c.external_id,
)

# ============================================================================
# USER IDENTITIES TABLE (login lookup mirror of credentials)
# ============================================================================
user_identities_table = Table(
    "user_identities",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")
    ),
    Column("user_id", UUID, nullable=False),
    Column("provider", String(50), nullable=False),  # Login variant only
    Column("auth_scheme", String(20), nullable=False),
    Column("external_id", String(255), nullable=False),
    Column("profile", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column("credentials", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "created", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "modified", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    UniqueConstraint("provider", "external_id", name="uq_identity_provider"),
)

Index("idx_user_identities_user_id", user_identities_table.c.user_id)
