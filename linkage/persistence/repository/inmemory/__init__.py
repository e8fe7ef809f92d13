"""In-memory repository implementations for testing."""

from .credential import InMemoryUserCredentialRepository
from .identity import InMemoryUserIdentityRepository

__all__ = [
    "InMemoryUserCredentialRepository",
    "InMemoryUserIdentityRepository",
]
