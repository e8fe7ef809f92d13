"""User identity entity.

Login-lookup mirror of a linked credential.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from linkage.domain.model.common import DomainModel
from linkage.domain.value import AuthScheme, IdentityId, ProviderName, UserId


class UserIdentity(DomainModel):
    """External identity used to find the local user at login.

    Identities are written once, when a credential is first linked, under the
    login variant of the credential's provider name. They carry their own ID
    and are not refreshed when the credential is re-linked.
    """

    id: IdentityId
    user_id: UserId
    provider: ProviderName  # Always the login variant
    auth_scheme: AuthScheme
    external_id: str
    profile: dict[str, Any] = Field(default_factory=dict)
    credentials: dict[str, Any] = Field(default_factory=dict)
    created: datetime
    modified: datetime
