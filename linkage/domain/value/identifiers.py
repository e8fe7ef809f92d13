"""Strongly typed identifiers for linkage domain entities.

Using NewType for strong typing prevents mixing up a credential ID with
an identity ID or a user ID.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
CredentialId = NewType("CredentialId", UUID)
IdentityId = NewType("IdentityId", UUID)
