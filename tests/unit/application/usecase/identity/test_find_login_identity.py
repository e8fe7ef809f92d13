"""Unit tests for FindLoginIdentityUseCase."""

from uuid import uuid4

import pytest

from linkage.application.usecase.identity import FindLoginIdentityUseCase
from linkage.application.usecase.identity.find_login_identity import (
    FindLoginIdentityRequest,
)
from linkage.domain.error import MalformedLinkError, NotFoundError
from linkage.domain.service import CredentialLinker
from linkage.domain.value import UserId
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestFindLoginIdentityUseCase:
    """Tests for FindLoginIdentityUseCase."""

    @pytest.mark.asyncio
    async def test_finds_user_linked_via_link_variant(self, unit_env):
        """Should resolve a -link credential through its -login identity."""
        # Arrange
        linker = await unit_env.get(CredentialLinker)
        use_case = await unit_env.get(FindLoginIdentityUseCase)
        user_id = UserId(uuid4())
        await linker.link(user_id, "facebook-link", "oAuth 2.0", {"id": "fb7"}, {})

        # Act
        response = await use_case.execute(
            FindLoginIdentityRequest(provider="facebook-login", external_id="fb7")
        )

        # Assert
        assert response.user_id == str(user_id)
        assert response.provider == "facebook-login"

    @pytest.mark.asyncio
    async def test_accepts_link_variant_name(self, unit_env):
        """Should normalize a -link provider name before the lookup."""
        linker = await unit_env.get(CredentialLinker)
        use_case = await unit_env.get(FindLoginIdentityUseCase)
        user_id = UserId(uuid4())
        await linker.link(user_id, "facebook-link", "oAuth 2.0", {"id": "fb7"}, {})

        response = await use_case.execute(
            FindLoginIdentityRequest(provider="facebook-link", external_id="fb7")
        )

        assert response.user_id == str(user_id)

    @pytest.mark.asyncio
    async def test_unknown_account(self, unit_env):
        """Should raise NotFoundError for an account nobody linked."""
        use_case = await unit_env.get(FindLoginIdentityUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                FindLoginIdentityRequest(provider="github", external_id="gh42")
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("provider", "external_id"), [("", "gh42"), ("  ", "gh42"), ("github", "")]
    )
    async def test_blank_fields(self, unit_env, provider, external_id):
        """Should reject blank lookups."""
        use_case = await unit_env.get(FindLoginIdentityUseCase)

        with pytest.raises(MalformedLinkError):
            await use_case.execute(
                FindLoginIdentityRequest(provider=provider, external_id=external_id)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", ["p" * 51, "x" * 45 + "-link"])
    async def test_oversized_provider(self, unit_env, provider):
        """Should reject provider names that cannot be stored."""
        use_case = await unit_env.get(FindLoginIdentityUseCase)

        with pytest.raises(MalformedLinkError) as exc_info:
            await use_case.execute(
                FindLoginIdentityRequest(provider=provider, external_id="gh42")
            )

        assert exc_info.value.field == "provider"
