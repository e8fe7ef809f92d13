"""Application layer DI providers."""

from dishka import Scope, provide

from linkage.application.usecase.credential import (
    GetUserCredentialsUseCase,
    LinkCredentialUseCase,
)
from linkage.application.usecase.identity import FindLoginIdentityUseCase
from linkage.domain.service import CredentialLinker, UserIdentityService
from linkage.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_link_credential_use_case(
        self, credential_linker: CredentialLinker
    ) -> LinkCredentialUseCase:
        """Provide link credential use case."""
        return LinkCredentialUseCase(credential_linker=credential_linker)

    @provide(scope=Scope.REQUEST)
    def get_user_credentials_use_case(
        self, credential_linker: CredentialLinker
    ) -> GetUserCredentialsUseCase:
        """Provide get user credentials use case."""
        return GetUserCredentialsUseCase(credential_linker=credential_linker)

    @provide(scope=Scope.REQUEST)
    def get_find_login_identity_use_case(
        self, user_identity_service: UserIdentityService
    ) -> FindLoginIdentityUseCase:
        """Provide find login identity use case."""
        return FindLoginIdentityUseCase(user_identity_service=user_identity_service)
