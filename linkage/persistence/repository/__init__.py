"""PostgreSQL repository implementations."""

from linkage.persistence.repository.credential import PostgresUserCredentialRepository
from linkage.persistence.repository.identity import PostgresUserIdentityRepository

__all__ = [
    "PostgresUserCredentialRepository",
    "PostgresUserIdentityRepository",
]
