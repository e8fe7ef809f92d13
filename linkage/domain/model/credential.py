"""User credential entity.

Tracks third-party logins and profiles linked to a local user account.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ConfigDict, Field

from linkage.domain.model.common import DomainModel
from linkage.domain.value import AuthScheme, CredentialId, ProviderName, UserId


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserCredential(DomainModel):
    """External account linked to a user.

    A user may hold many credentials, but a given (provider, external_id)
    pair belongs to exactly one credential row. ``provider`` and
    ``external_id`` never change after creation.
    """

    id: CredentialId
    user_id: UserId
    provider: ProviderName  # "github", "facebook-link", ...
    auth_scheme: AuthScheme
    external_id: str  # Account ID assigned by the provider
    profile: dict[str, Any] = Field(default_factory=dict)
    credentials: dict[str, Any] = Field(default_factory=dict)
    created: datetime = Field(default_factory=_now)
    modified: datetime = Field(default_factory=_now)

    @property
    def link_key(self) -> tuple[str, str]:
        """The (provider, external_id) pair that must stay unique."""
        return (self.provider.root, self.external_id)


class CredentialUpdate(DomainModel):
    """Change-set applied to an existing credential.

    Has no field for ``provider`` or ``external_id``: identity fields cannot
    be expressed on the update path. Unknown keys are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    profile: Optional[dict[str, Any]] = None
    credentials: Optional[dict[str, Any]] = None
    auth_scheme: Optional[AuthScheme] = None
    modified: datetime = Field(default_factory=_now)

    def changed_values(self) -> dict[str, Any]:
        """Fields the update actually sets."""
        values: dict[str, Any] = {"modified": self.modified}
        for name in ("profile", "credentials", "auth_scheme"):
            value = getattr(self, name)
            if value is not None:
                values[name] = value
        return values

    def apply_to(self, credential: UserCredential) -> UserCredential:
        """Return ``credential`` with this change-set applied."""
        return credential.model_copy(update=self.changed_values())
