"""UserCredential repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from linkage.domain.error import NotFoundError
from linkage.domain.model.credential import CredentialUpdate, UserCredential
from linkage.domain.repository.credential import UserCredentialRepository
from linkage.domain.value import CredentialId, ProviderName, UserId
from linkage.persistence.mappers import credential_to_dict, row_to_credential
from linkage.persistence.tables import user_credentials_table


class PostgresUserCredentialRepository(UserCredentialRepository):
    """PostgreSQL implementation of UserCredentialRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, credential_id: CredentialId) -> Optional[UserCredential]:
        """Get credential by ID."""
        stmt = select(user_credentials_table).where(
            user_credentials_table.c.id == credential_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_credential(dict(row)) if row else None

    async def find_one(
        self, user_id: UserId, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Get a user's credential for one external account."""
        stmt = select(user_credentials_table).where(
            and_(
                user_credentials_table.c.user_id == user_id,
                user_credentials_table.c.provider == provider.root,
                user_credentials_table.c.external_id == external_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_credential(dict(row)) if row else None

    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Get the credential for an external account, whoever owns it."""
        stmt = select(user_credentials_table).where(
            and_(
                user_credentials_table.c.provider == provider.root,
                user_credentials_table.c.external_id == external_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_credential(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserCredential]:
        """Find all credentials for a user, oldest first."""
        stmt = (
            select(user_credentials_table)
            .where(user_credentials_table.c.user_id == user_id)
            .order_by(user_credentials_table.c.created)
        )
        result = await self.session.execute(stmt)
        return [row_to_credential(dict(row)) for row in result.mappings().all()]

    async def create(self, credential: UserCredential) -> UserCredential:
        """Insert a credential.

        Raises:
            IntegrityError: If uq_credential_link is violated
        """
        stmt = insert(user_credentials_table).values(**credential_to_dict(credential))
        await self.session.execute(stmt)
        await self.session.flush()
        return credential

    async def update(
        self, credential_id: CredentialId, changes: CredentialUpdate
    ) -> UserCredential:
        """Apply a change-set and return the stored row."""
        values = changes.changed_values()
        if "auth_scheme" in values:
            values["auth_scheme"] = values["auth_scheme"].value

        stmt = (
            update(user_credentials_table)
            .where(user_credentials_table.c.id == credential_id)
            .values(**values)
            .returning(user_credentials_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundError("Credential", str(credential_id))

        await self.session.flush()
        return row_to_credential(dict(row))
