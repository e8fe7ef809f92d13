"""Link credential use case."""

from datetime import datetime
from typing import Any
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from linkage.application.usecase.base import BaseUseCase
from linkage.domain.service import CredentialLinker
from linkage.domain.value import AuthScheme, LinkOptions, UserId


class LinkCredentialRequest(BaseModel):
    """Completed handshake handed over by the OAuth driver."""

    user_id: UUID
    provider: str  # Provider name, including "-link" variant if any
    auth_scheme: AuthScheme
    profile: dict[str, Any]  # Must carry the external account ID at "id"
    credentials: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)


class LinkCredentialResponse(BaseModel):
    """Link credential response."""

    credential_id: str
    user_id: str
    provider: str
    external_id: str
    created: datetime
    modified: datetime


class LinkCredentialUseCase(BaseUseCase):
    """Use case for linking an external account to a user."""

    def __init__(self, credential_linker: CredentialLinker) -> None:
        """Initialize link credential use case.

        Args:
            credential_linker: Credential linker domain service
        """
        self.credential_linker = credential_linker

    async def execute(self, request: LinkCredentialRequest) -> LinkCredentialResponse:
        """Link or refresh the credential.

        Args:
            request: Handshake result

        Returns:
            The persisted credential's identifiers and timestamps

        Raises:
            DuplicateLinkError: If the account is linked already
            MalformedLinkError: If the handshake result is incomplete
        """
        credential = await self.credential_linker.link(
            user_id=UserId(request.user_id),
            provider=request.provider,
            auth_scheme=request.auth_scheme,
            profile=request.profile,
            credentials=request.credentials,
            options=LinkOptions.model_validate(request.options),
        )

        logfire.info(
            "Link request completed",
            credential_id=str(credential.id),
            refreshed=credential.modified != credential.created,
        )

        return LinkCredentialResponse(
            credential_id=str(credential.id),
            user_id=str(credential.user_id),
            provider=credential.provider.root,
            external_id=credential.external_id,
            created=credential.created,
            modified=credential.modified,
        )
