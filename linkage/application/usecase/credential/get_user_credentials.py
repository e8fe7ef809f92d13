"""Get user credentials use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from linkage.application.usecase.base import BaseUseCase
from linkage.domain.service import CredentialLinker
from linkage.domain.value import UserId


class GetUserCredentialsRequest(BaseModel):
    """Request for a user's linked accounts."""

    user_id: UUID


class LinkedAccount(BaseModel):
    """One linked external account. Tokens are not exposed."""

    credential_id: str
    provider: str
    auth_scheme: str
    external_id: str
    created: datetime
    modified: datetime


class GetUserCredentialsResponse(BaseModel):
    """Linked accounts of a user, oldest first."""

    user_id: str
    accounts: list[LinkedAccount]


class GetUserCredentialsUseCase(BaseUseCase):
    """Use case for listing the external accounts linked to a user."""

    def __init__(self, credential_linker: CredentialLinker) -> None:
        self.credential_linker = credential_linker

    async def execute(
        self, request: GetUserCredentialsRequest
    ) -> GetUserCredentialsResponse:
        credentials = await self.credential_linker.get_credentials_for_user(
            UserId(request.user_id)
        )
        return GetUserCredentialsResponse(
            user_id=str(request.user_id),
            accounts=[
                LinkedAccount(
                    credential_id=str(c.id),
                    provider=c.provider.root,
                    auth_scheme=c.auth_scheme.value,
                    external_id=c.external_id,
                    created=c.created,
                    modified=c.modified,
                )
                for c in credentials
            ],
        )
