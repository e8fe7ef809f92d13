"""Find login identity use case."""

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from linkage.application.usecase.base import BaseUseCase
from linkage.domain.error import MalformedLinkError, NotFoundError
from linkage.domain.service import UserIdentityService
from linkage.domain.value import ProviderName


class FindLoginIdentityRequest(BaseModel):
    """Login lookup for an external account."""

    provider: str  # Either variant; "-link" names are looked up as "-login"
    external_id: str


class FindLoginIdentityResponse(BaseModel):
    """Local user owning the external account."""

    identity_id: str
    user_id: str
    provider: str
    external_id: str


class FindLoginIdentityUseCase(BaseUseCase):
    """Use case for resolving an external account to a local user at login."""

    def __init__(self, user_identity_service: UserIdentityService) -> None:
        """Initialize find login identity use case.

        Args:
            user_identity_service: Identity registry service
        """
        self.user_identity_service = user_identity_service

    async def execute(
        self, request: FindLoginIdentityRequest
    ) -> FindLoginIdentityResponse:
        """Resolve the identity.

        Raises:
            MalformedLinkError: If the provider name is empty or invalid
            NotFoundError: If no identity is registered for the account
        """
        if not request.provider.strip() or not request.external_id:
            raise MalformedLinkError("Provider and external ID are required")

        try:
            provider = ProviderName(request.provider)
            self.user_identity_service.login_provider(provider)
        except PydanticValidationError as e:
            raise MalformedLinkError(
                f"Invalid provider: {request.provider!r}", field="provider"
            ) from e

        identity = await self.user_identity_service.get_identity_by_provider(
            provider, request.external_id
        )
        if not identity:
            raise NotFoundError(
                "Identity", f"{request.provider}:{request.external_id}"
            )

        return FindLoginIdentityResponse(
            identity_id=str(identity.id),
            user_id=str(identity.user_id),
            provider=identity.provider.root,
            external_id=identity.external_id,
        )
