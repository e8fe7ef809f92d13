"""Repository interfaces for the linkage domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from linkage.domain.repository.credential import UserCredentialRepository
from linkage.domain.repository.identity import UserIdentityRepository

__all__ = [
    "UserCredentialRepository",
    "UserIdentityRepository",
]
