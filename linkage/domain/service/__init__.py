"""Domain services."""

from .base import Service
from .consistency_guard import ConsistencyGuard
from .credential_linker import CredentialLinker
from .user_identity_service import UserIdentityService

__all__ = [
    "ConsistencyGuard",
    "CredentialLinker",
    "Service",
    "UserIdentityService",
]
