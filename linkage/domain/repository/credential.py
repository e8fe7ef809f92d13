"""User credential repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from linkage.domain.model.credential import CredentialUpdate, UserCredential
from linkage.domain.value import CredentialId, ProviderName, UserId


class UserCredentialRepository(ABC):
    """Repository for UserCredential entity.

    Stores the links between local users and external provider accounts.
    """

    @abstractmethod
    async def find_by_id(self, credential_id: CredentialId) -> Optional[UserCredential]:
        """Find a credential by ID.

        Args:
            credential_id: The credential's unique identifier

        Returns:
            The credential if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_one(
        self, user_id: UserId, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Find a user's credential for one external account.

        Args:
            user_id: The owning user
            provider: The provider name, including its variant
            external_id: The account ID on that provider

        Returns:
            The credential if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> Optional[UserCredential]:
        """Find the credential for an external account, whoever owns it.

        Args:
            provider: The provider name, including its variant
            external_id: The account ID on that provider

        Returns:
            The credential if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[UserCredential]:
        """Get all credentials linked to a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of credentials (may be empty)
        """
        pass

    @abstractmethod
    async def create(self, credential: UserCredential) -> UserCredential:
        """Insert a new credential.

        Args:
            credential: The credential to insert

        Returns:
            The stored credential

        Raises:
            IntegrityError: If (provider, external_id) is already stored
        """
        pass

    @abstractmethod
    async def update(
        self, credential_id: CredentialId, changes: CredentialUpdate
    ) -> UserCredential:
        """Apply a change-set to an existing credential.

        Args:
            credential_id: The credential to update
            changes: Fields to overwrite

        Returns:
            The credential as stored after the update

        Raises:
            NotFoundError: If the credential does not exist
        """
        pass
