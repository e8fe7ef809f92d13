"""Domain layer DI providers."""

from dishka import Scope, provide

from linkage.config import LinkingSettings
from linkage.domain.repository import UserCredentialRepository, UserIdentityRepository
from linkage.domain.service import (
    ConsistencyGuard,
    CredentialLinker,
    UserIdentityService,
)
from linkage.util.di.base import ProviderBase
from linkage.util.locking import KeyedLock


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_user_identity_service(
        self,
        user_identity_repository: UserIdentityRepository,
        linking_settings: LinkingSettings,
    ) -> UserIdentityService:
        """Provide user identity domain service."""
        return UserIdentityService(
            user_identity_repository=user_identity_repository,
            linking_settings=linking_settings,
        )

    @provide
    def get_consistency_guard(
        self,
        credential_repository: UserCredentialRepository,
        user_identity_service: UserIdentityService,
        linking_settings: LinkingSettings,
        creation_locks: KeyedLock,
    ) -> ConsistencyGuard:
        """Provide consistency guard."""
        return ConsistencyGuard(
            credential_repository=credential_repository,
            user_identity_service=user_identity_service,
            linking_settings=linking_settings,
            creation_locks=creation_locks,
        )

    @provide
    def get_credential_linker(
        self,
        credential_repository: UserCredentialRepository,
        consistency_guard: ConsistencyGuard,
    ) -> CredentialLinker:
        """Provide credential linker domain service."""
        return CredentialLinker(
            credential_repository=credential_repository,
            consistency_guard=consistency_guard,
        )
