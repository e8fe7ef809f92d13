"""Integration tests for the PostgreSQL repositories.

Require a migrated database at DATABASE__URL; run with LINKAGE_INTEGRATION=1.
"""

import os
from uuid import uuid4

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from linkage.domain.error import DuplicateLinkError
from linkage.domain.model import CredentialUpdate
from linkage.domain.repository import UserCredentialRepository, UserIdentityRepository
from linkage.domain.service import ConsistencyGuard, CredentialLinker
from linkage.domain.value import ProviderName, UserId
from tests.conftest import make_credential
from tests.di import build_test_container
from tests.harness import create_env_fixture

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.environ.get("LINKAGE_INTEGRATION") != "1",
        reason="set LINKAGE_INTEGRATION=1 to run against PostgreSQL",
    ),
]

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


def unique_external_id() -> str:
    return f"it-{uuid4()}"


class TestPostgresUserCredentialRepository:
    """Integration tests for PostgresUserCredentialRepository."""

    @pytest.mark.asyncio
    async def test_create_and_find(self, integration_env):
        """Should round-trip JSONB blobs and the auth scheme."""
        repo = await integration_env.get(UserCredentialRepository)
        credential = make_credential(
            external_id=unique_external_id(),
            credentials={"accessToken": "a1", "scopes": ["repo", "user"]},
        )

        await repo.create(credential)
        found = await repo.find_by_provider(credential.provider, credential.external_id)

        assert found == credential

    @pytest.mark.asyncio
    async def test_unique_link_constraint(self, integration_env):
        """Should let the store reject a second row for the same account."""
        repo = await integration_env.get(UserCredentialRepository)
        session = await integration_env.get(AsyncSession)
        external_id = unique_external_id()
        await repo.create(make_credential(external_id=external_id))

        with pytest.raises(IntegrityError):
            async with session.begin_nested():
                await repo.create(make_credential(external_id=external_id))

    @pytest.mark.asyncio
    async def test_update_keeps_identity_fields(self, integration_env):
        """Should write only the change-set columns."""
        repo = await integration_env.get(UserCredentialRepository)
        credential = make_credential(external_id=unique_external_id())
        await repo.create(credential)

        updated = await repo.update(
            credential.id, CredentialUpdate(credentials={"accessToken": "t2"})
        )

        assert updated.credentials == {"accessToken": "t2"}
        assert updated.link_key == credential.link_key
        assert updated.created == credential.created


class TestPostgresUserIdentityRepository:
    """Integration tests for PostgresUserIdentityRepository."""

    @pytest.mark.asyncio
    async def test_find_or_create_is_idempotent(self, integration_env):
        linker = await integration_env.get(CredentialLinker)
        identity_repo = await integration_env.get(UserIdentityRepository)
        external_id = unique_external_id()
        credential = make_credential(provider="facebook-link", external_id=external_id)

        first = await linker.consistency_guard.after_save(credential)
        second = await linker.consistency_guard.after_save(credential)

        assert second.id == first.id
        stored = await identity_repo.find_by_provider(
            ProviderName("facebook-login"), external_id
        )
        assert stored.id == first.id


class TestLinkAcrossRequests:
    """Linking through separate request scopes, as concurrent callers would."""

    @pytest.mark.asyncio
    async def test_second_user_rejected_after_commit(self):
        container = build_test_container(unmock={"persistence"})
        external_id = unique_external_id()
        try:
            async with container() as request:
                linker = await request.get(CredentialLinker)
                await linker.link(
                    UserId(uuid4()), "github", "oAuth 2.0", {"id": external_id}, {}
                )

            with pytest.raises(DuplicateLinkError):
                async with container() as request:
                    linker = await request.get(CredentialLinker)
                    await linker.link(
                        UserId(uuid4()), "github", "oAuth 2.0", {"id": external_id}, {}
                    )
        finally:
            await container.close()


class TestMirrorFailureInTransaction:
    """A failed identity insert must not take the credential write with it."""

    @pytest.mark.asyncio
    async def test_credential_commits_when_identity_insert_fails(self):
        container = build_test_container(unmock={"persistence"})
        credential = make_credential(external_id=unique_external_id())
        try:
            async with container() as request:
                credential_repo = await request.get(UserCredentialRepository)
                identity_repo = await request.get(UserIdentityRepository)
                guard = await request.get(ConsistencyGuard)
                await credential_repo.create(credential)

                # JSONB rejects NUL characters, so the identity insert fails
                # inside the database rather than in Python.
                bad_profile = {"id": credential.external_id, "bad": "\x00"}
                identity = guard.to_identity(credential).model_copy(
                    update={"profile": bad_profile}
                )
                with pytest.raises(DBAPIError):
                    await identity_repo.find_or_create(identity)

            async with container() as request:
                credential_repo = await request.get(UserCredentialRepository)
                identity_repo = await request.get(UserIdentityRepository)

                stored = await credential_repo.find_by_id(credential.id)
                assert stored is not None
                assert stored.link_key == credential.link_key
                assert (
                    await identity_repo.find_by_provider(
                        credential.provider, credential.external_id
                    )
                    is None
                )
        finally:
            await container.close()
