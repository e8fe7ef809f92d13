"""Unit tests for LinkCredentialUseCase."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from linkage.application.usecase.credential import LinkCredentialUseCase
from linkage.application.usecase.credential.link_credential import (
    LinkCredentialRequest,
)
from linkage.domain.error import DuplicateLinkError, MalformedLinkError
from linkage.domain.repository import UserCredentialRepository, UserIdentityRepository
from linkage.domain.value import ProviderName
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLinkCredentialUseCase:
    """Tests for LinkCredentialUseCase."""

    @pytest.mark.asyncio
    async def test_link_new_account(self, unit_env):
        """Should create the credential and its identity."""
        # Arrange
        use_case = await unit_env.get(LinkCredentialUseCase)
        identity_repo = await unit_env.get(UserIdentityRepository)
        user_id = uuid4()

        # Act
        response = await use_case.execute(
            LinkCredentialRequest(
                user_id=user_id,
                provider="github",
                auth_scheme="oAuth 2.0",
                profile={"id": "gh42", "username": "octo"},
                credentials={"accessToken": "t1"},
            )
        )

        # Assert
        assert response.user_id == str(user_id)
        assert response.provider == "github"
        assert response.external_id == "gh42"
        assert response.created == response.modified
        identity = await identity_repo.find_by_provider(ProviderName("github"), "gh42")
        assert identity is not None
        assert str(identity.user_id) == str(user_id)

    @pytest.mark.asyncio
    async def test_relink_returns_same_credential(self, unit_env):
        """Should refresh the credential on a second link by the same user."""
        # Arrange
        use_case = await unit_env.get(LinkCredentialUseCase)
        credential_repo = await unit_env.get(UserCredentialRepository)
        request = LinkCredentialRequest(
            user_id=uuid4(),
            provider="github",
            auth_scheme="oAuth 2.0",
            profile={"id": "gh42"},
            credentials={"accessToken": "t1"},
        )
        first = await use_case.execute(request)

        # Act
        second = await use_case.execute(
            request.model_copy(update={"credentials": {"accessToken": "t2"}})
        )

        # Assert
        assert second.credential_id == first.credential_id
        assert second.created == first.created
        stored = await credential_repo.find_all_by_user_id(request.user_id)
        assert len(stored) == 1
        assert stored[0].credentials == {"accessToken": "t2"}

    @pytest.mark.asyncio
    async def test_duplicate_link_for_other_user(self, unit_env):
        """Should reject an account already linked to another user."""
        use_case = await unit_env.get(LinkCredentialUseCase)
        request = LinkCredentialRequest(
            user_id=uuid4(),
            provider="github",
            auth_scheme="oAuth 2.0",
            profile={"id": "gh42"},
        )
        await use_case.execute(request)

        with pytest.raises(DuplicateLinkError):
            await use_case.execute(request.model_copy(update={"user_id": uuid4()}))

    @pytest.mark.asyncio
    async def test_profile_without_id(self, unit_env):
        """Should reject a handshake that did not yield an account ID."""
        use_case = await unit_env.get(LinkCredentialUseCase)

        with pytest.raises(MalformedLinkError):
            await use_case.execute(
                LinkCredentialRequest(
                    user_id=uuid4(),
                    provider="github",
                    auth_scheme="oAuth 2.0",
                    profile={"username": "octo"},
                )
            )

    def test_request_rejects_unknown_scheme(self):
        """Should refuse unsupported schemes at the request boundary."""
        with pytest.raises(ValidationError):
            LinkCredentialRequest(
                user_id=uuid4(),
                provider="github",
                auth_scheme="SAML",
                profile={"id": "gh42"},
            )
