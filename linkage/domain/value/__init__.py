"""Domain value objects for linkage."""

from linkage.domain.value.identifiers import CredentialId, IdentityId, UserId
from linkage.domain.value.types import AuthScheme, LinkOptions, ProviderName

__all__ = [
    # Identifiers
    "UserId",
    "CredentialId",
    "IdentityId",
    # Types
    "AuthScheme",
    "LinkOptions",
    "ProviderName",
]
