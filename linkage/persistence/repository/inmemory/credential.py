"""In-memory user credential repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from linkage.domain.error import NotFoundError
from linkage.domain.model.credential import CredentialUpdate, UserCredential
from linkage.domain.repository.credential import UserCredentialRepository
from linkage.domain.value import CredentialId, ProviderName, UserId


class InMemoryUserCredentialRepository(UserCredentialRepository):
    """In-memory implementation of UserCredentialRepository for testing.

    Mirrors the uq_credential_link constraint of the Postgres table.
    """

    def __init__(self) -> None:
        self._credentials: list[UserCredential] = []

    async def find_by_id(self, credential_id: CredentialId) -> Optional[UserCredential]:
        """Find credential by ID."""
        for credential in self._credentials:
            if credential.id == credential_id:
                return credential
        return None

    async def find_one(
        self, user_id: UserId, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Find a user's credential for one external account."""
        for credential in self._credentials:
            if (
                credential.user_id == user_id
                and credential.provider == provider
                and credential.external_id == external_id
            ):
                return credential
        return None

    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Find the credential for an external account, whoever owns it."""
        for credential in self._credentials:
            if credential.provider == provider and credential.external_id == external_id:
                return credential
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserCredential]:
        """Find all credentials for a user, oldest first."""
        matches = [c for c in self._credentials if c.user_id == user_id]
        matches.sort(key=lambda c: c.created)
        return matches

    async def create(self, credential: UserCredential) -> UserCredential:
        """Insert a credential.

        Raises:
            IntegrityError: If (provider, external_id) is already stored
        """
        for existing in self._credentials:
            if existing.link_key == credential.link_key:
                raise IntegrityError("Duplicate credential link", None, Exception())

        self._credentials.append(credential)
        return credential

    async def update(
        self, credential_id: CredentialId, changes: CredentialUpdate
    ) -> UserCredential:
        """Apply a change-set to a stored credential."""
        for i, existing in enumerate(self._credentials):
            if existing.id == credential_id:
                updated = changes.apply_to(existing)
                self._credentials[i] = updated
                return updated
        raise NotFoundError("Credential", str(credential_id))

    def count(self) -> int:
        """Number of stored credentials."""
        return len(self._credentials)
