"""User identity repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from linkage.domain.model.identity import UserIdentity
from linkage.domain.value import ProviderName, UserId


class UserIdentityRepository(ABC):
    """Repository for UserIdentity entity.

    The identity registry is written from credential links and read at
    login time.
    """

    @abstractmethod
    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserIdentity]:
        """Find an identity by provider and external account ID.

        Args:
            provider: The login-variant provider name
            external_id: The account ID on that provider

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        """Get all identities of a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of identities (may be empty)
        """
        pass

    @abstractmethod
    async def find_or_create(self, identity: UserIdentity) -> UserIdentity:
        """Return the identity stored for (provider, external_id), creating it if absent.

        An existing identity is returned as stored; the given values are
        only used when a new row is inserted.

        Args:
            identity: Values for the identity, keyed on provider and external_id

        Returns:
            The stored identity
        """
        pass
