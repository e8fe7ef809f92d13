"""Domain value objects for linkage.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import ConfigDict, field_validator

from linkage.domain.value.common import RootValueObject, ValueObject


class AuthScheme(str, Enum):
    """Authentication protocol a credential was obtained with.

    The scheme decides the shape of the credentials blob:
    - oAuth: token, tokenSecret
    - oAuth 2.0: accessToken, refreshToken
    - OpenID: openId
    - OpenID Connect: accessToken, refreshToken, profile
    """

    OAUTH = "oAuth"
    OAUTH2 = "oAuth 2.0"
    OPENID = "OpenID"
    OPENID_CONNECT = "OpenID Connect"


class ProviderName(RootValueObject[str]):
    """External provider name, including its flow variant.

    The same service can appear as a login variant ("facebook",
    "facebook-login") or a link variant ("facebook-link"). Credentials keep
    the name they were linked under; identities use the login variant.
    """

    @field_validator("root")
    @classmethod
    def validate_provider_name(cls, v: str) -> str:
        """Validate provider name is not blank and fits the column."""
        if not v or not v.strip():
            raise ValueError("Provider name must not be empty")
        if len(v) > 50:
            raise ValueError("Provider name must be 1-50 characters")
        return v

    def is_link_variant(self, link_suffix: str = "-link") -> bool:
        """Whether this name is the account-linking variant."""
        return self.root.endswith(link_suffix)

    def as_login_variant(
        self, link_suffix: str = "-link", login_suffix: str = "-login"
    ) -> "ProviderName":
        """Return the login-variant name.

        Only a trailing link suffix is rewritten; any other name is returned
        unchanged.
        """
        if not self.is_link_variant(link_suffix):
            return self
        return ProviderName(self.root[: -len(link_suffix)] + login_suffix)


class LinkOptions(ValueObject):
    """Options accepted by the credential linker.

    No keys are recognized yet. Unknown keys are kept and ignored so callers
    can pass options ahead of the linker supporting them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")
