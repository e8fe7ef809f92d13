"""Test configuration and fixtures."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import logfire
import pytest

from linkage.domain.model import UserCredential
from linkage.domain.value import AuthScheme, CredentialId, ProviderName, UserId

# Keep spans and logs local during tests
logfire.configure(send_to_logfire=False, console=False)


def make_credential(
    user_id: UserId | None = None,
    provider: str = "github",
    external_id: str = "gh42",
    auth_scheme: AuthScheme = AuthScheme.OAUTH2,
    **overrides: Any,
) -> UserCredential:
    """Build a credential with sensible defaults for tests."""
    now = datetime.now(timezone.utc)
    values: dict[str, Any] = {
        "id": CredentialId(uuid4()),
        "user_id": user_id or UserId(uuid4()),
        "provider": ProviderName(provider),
        "auth_scheme": auth_scheme,
        "external_id": external_id,
        "profile": {"id": external_id, "username": "octo"},
        "credentials": {"accessToken": "a1", "refreshToken": "r1"},
        "created": now,
        "modified": now,
    }
    values.update(overrides)
    return UserCredential(**values)


@pytest.fixture
def user_id() -> UserId:
    """A fresh local user ID."""
    return UserId(uuid4())
