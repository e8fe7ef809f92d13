"""In-memory user identity repository for testing."""

from typing import Optional

from linkage.domain.model.identity import UserIdentity
from linkage.domain.repository.identity import UserIdentityRepository
from linkage.domain.value import ProviderName, UserId


class InMemoryUserIdentityRepository(UserIdentityRepository):
    """In-memory implementation of UserIdentityRepository for testing."""

    def __init__(self) -> None:
        self._identities: list[UserIdentity] = []

    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserIdentity]:
        """Find identity by provider and external account ID."""
        for identity in self._identities:
            if identity.provider == provider and identity.external_id == external_id:
                return identity
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        """Find all identities for a user, oldest first."""
        matches = [i for i in self._identities if i.user_id == user_id]
        matches.sort(key=lambda i: i.created)
        return matches

    async def find_or_create(self, identity: UserIdentity) -> UserIdentity:
        """Return the stored identity, or store the given one."""
        existing = await self.find_by_provider(identity.provider, identity.external_id)
        if existing:
            return existing

        self._identities.append(identity)
        return identity

    def count(self) -> int:
        """Number of stored identities."""
        return len(self._identities)
