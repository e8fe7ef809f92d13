"""User identity domain service."""

import logfire

from linkage.config import LinkingSettings
from linkage.domain.model.identity import UserIdentity
from linkage.domain.repository.identity import UserIdentityRepository
from linkage.domain.value import ProviderName, UserId

from .base import Service


class UserIdentityService(Service):
    """Domain service for the identity registry."""

    def __init__(
        self,
        user_identity_repository: UserIdentityRepository,
        linking_settings: LinkingSettings,
    ) -> None:
        """Initialize user identity service.

        Args:
            user_identity_repository: User identity repository
            linking_settings: Provider suffix configuration
        """
        self.user_identity_repository = user_identity_repository
        self.linking_settings = linking_settings

    def login_provider(self, provider: ProviderName) -> ProviderName:
        """Map a provider name to the variant identities are stored under."""
        return provider.as_login_variant(
            self.linking_settings.link_suffix, self.linking_settings.login_suffix
        )

    async def get_identity_by_provider(
        self, provider: ProviderName, external_id: str
    ) -> UserIdentity | None:
        """Get identity by provider and external account ID.

        Link-variant names are looked up under their login variant, since
        that is where mirrored identities live.

        Args:
            provider: Provider name, either variant
            external_id: Provider-specific account ID

        Returns:
            Identity if found, None otherwise
        """
        login_provider = self.login_provider(provider)
        with logfire.span(
            "user_identity_service.get_identity_by_provider",
            provider=login_provider.root,
            external_id=external_id,
        ):
            identity = await self.user_identity_repository.find_by_provider(
                login_provider, external_id
            )
            if identity:
                logfire.info(
                    "Identity found",
                    provider=login_provider.root,
                    external_id=external_id,
                    user_id=str(identity.user_id),
                )
            else:
                logfire.warn(
                    "Identity not found",
                    provider=login_provider.root,
                    external_id=external_id,
                )
            return identity

    async def get_all_identities_for_user(self, user_id: UserId) -> list[UserIdentity]:
        """Get all identities of a user.

        Args:
            user_id: User ID

        Returns:
            List of identities (may be empty)
        """
        with logfire.span(
            "user_identity_service.get_all_identities_for_user", user_id=str(user_id)
        ):
            identities = await self.user_identity_repository.find_all_by_user_id(
                user_id
            )
            logfire.info(
                "Identities retrieved for user",
                user_id=str(user_id),
                count=len(identities),
            )
            return identities

    async def mirror(self, identity: UserIdentity) -> UserIdentity:
        """Find or create the identity keyed on its provider and external ID.

        Args:
            identity: Identity values to insert when none is stored yet

        Returns:
            The stored identity, which may predate this call
        """
        with logfire.span(
            "user_identity_service.mirror",
            provider=identity.provider.root,
            external_id=identity.external_id,
            user_id=str(identity.user_id),
        ):
            stored = await self.user_identity_repository.find_or_create(identity)
            logfire.info(
                "Identity mirrored",
                identity_id=str(stored.id),
                provider=stored.provider.root,
                created=stored.id == identity.id,
            )
            return stored
