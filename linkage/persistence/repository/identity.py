"""UserIdentity repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from linkage.domain.model.identity import UserIdentity
from linkage.domain.repository.identity import UserIdentityRepository
from linkage.domain.value import ProviderName, UserId
from linkage.persistence.mappers import identity_to_dict, row_to_identity
from linkage.persistence.tables import user_identities_table


class PostgresUserIdentityRepository(UserIdentityRepository):
    """PostgreSQL implementation of UserIdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserIdentity]:
        """Get identity by provider and external account ID."""
        stmt = select(user_identities_table).where(
            and_(
                user_identities_table.c.provider == provider.root,
                user_identities_table.c.external_id == external_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_identity(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        """Find all identities for a user, oldest first."""
        stmt = (
            select(user_identities_table)
            .where(user_identities_table.c.user_id == user_id)
            .order_by(user_identities_table.c.created)
        )
        result = await self.session.execute(stmt)
        return [row_to_identity(dict(row)) for row in result.mappings().all()]

    async def find_or_create(self, identity: UserIdentity) -> UserIdentity:
        """Insert the identity unless one exists for its provider and external ID.

        Runs in a SAVEPOINT: a failed mirror rolls back only itself, so a
        credential written earlier in the same transaction can still commit.
        ON CONFLICT DO NOTHING makes the insert safe against a concurrent
        mirror of the same account; the row is re-read either way.
        """
        async with self.session.begin_nested():
            existing = await self.find_by_provider(
                identity.provider, identity.external_id
            )
            if existing:
                return existing

            stmt = (
                insert(user_identities_table)
                .values(**identity_to_dict(identity))
                .on_conflict_do_nothing(constraint="uq_identity_provider")
            )
            await self.session.execute(stmt)

            stored = await self.find_by_provider(
                identity.provider, identity.external_id
            )
            return stored or identity
