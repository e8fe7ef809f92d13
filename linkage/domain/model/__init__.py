"""Domain model entities for linkage."""

from linkage.domain.model.credential import CredentialUpdate, UserCredential
from linkage.domain.model.identity import UserIdentity

__all__ = [
    "CredentialUpdate",
    "UserCredential",
    "UserIdentity",
]
