"""Mappers for converting between database rows and domain models.

Since the domain models are immutable Pydantic models, rows are mapped by
hand instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict
from uuid import UUID

from linkage.domain.model import UserCredential, UserIdentity
from linkage.domain.value import (
    AuthScheme,
    CredentialId,
    IdentityId,
    ProviderName,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_credential(row: Dict[str, Any]) -> UserCredential:
    """Convert database row to UserCredential domain model.

    Args:
        row: Database row as dict

    Returns:
        UserCredential domain model
    """
    return UserCredential(
        id=CredentialId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=ProviderName(row["provider"]),
        auth_scheme=AuthScheme(row["auth_scheme"]),
        external_id=row["external_id"],
        profile=row.get("profile") or {},
        credentials=row.get("credentials") or {},
        created=row["created"],
        modified=row["modified"],
    )


def credential_to_dict(credential: UserCredential) -> Dict[str, Any]:
    """Convert UserCredential domain model to database dict.

    Args:
        credential: UserCredential domain model

    Returns:
        Dict suitable for database insertion
    """
    # ProviderName is a RootModel, so model_dump() yields the plain string
    data = credential.model_dump()
    data["auth_scheme"] = credential.auth_scheme.value
    return data


def row_to_identity(row: Dict[str, Any]) -> UserIdentity:
    """Convert database row to UserIdentity domain model.

    Args:
        row: Database row as dict

    Returns:
        UserIdentity domain model
    """
    return UserIdentity(
        id=IdentityId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=ProviderName(row["provider"]),
        auth_scheme=AuthScheme(row["auth_scheme"]),
        external_id=row["external_id"],
        profile=row.get("profile") or {},
        credentials=row.get("credentials") or {},
        created=row["created"],
        modified=row["modified"],
    )


def identity_to_dict(identity: UserIdentity) -> Dict[str, Any]:
    """Convert UserIdentity domain model to database dict.

    Args:
        identity: UserIdentity domain model

    Returns:
        Dict suitable for database insertion
    """
    data = identity.model_dump()
    data["auth_scheme"] = identity.auth_scheme.value
    return data
