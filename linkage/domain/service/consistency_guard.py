"""Consistency guard for credential writes.

Runs around every credential write made by the linker:

- before a create, rejects an external account that is already linked;
- before an update, strips the identity fields from the change-set;
- after any write, mirrors the credential into the identity registry.

The duplicate check and the insert are not atomic at the store. Inside one
process ``creation_window`` serializes them per (provider, external_id);
across processes the unique constraint on the credential table decides.
"""

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from copy import deepcopy
from typing import Any
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from linkage.config import LinkingSettings
from linkage.domain.error import DuplicateLinkError, MalformedLinkError
from linkage.domain.model.credential import CredentialUpdate, UserCredential
from linkage.domain.model.identity import UserIdentity
from linkage.domain.repository.credential import UserCredentialRepository
from linkage.domain.value import IdentityId, ProviderName
from linkage.util.locking import KeyedLock

from .base import Service
from .user_identity_service import UserIdentityService

IMMUTABLE_FIELDS = frozenset({"provider", "external_id"})


class ConsistencyGuard(Service):
    """Pre-write and post-write rules for UserCredential."""

    def __init__(
        self,
        credential_repository: UserCredentialRepository,
        user_identity_service: UserIdentityService,
        linking_settings: LinkingSettings,
        creation_locks: KeyedLock | None = None,
    ) -> None:
        """Initialize consistency guard.

        Args:
            credential_repository: Credential repository used for the duplicate check
            user_identity_service: Identity registry the guard mirrors into
            linking_settings: Linking configuration
            creation_locks: Process-wide lock registry; creation is not
                serialized when None
        """
        self.credential_repository = credential_repository
        self.user_identity_service = user_identity_service
        self.linking_settings = linking_settings
        self.creation_locks = creation_locks

    @asynccontextmanager
    async def creation_window(self, credential: UserCredential) -> AsyncIterator[None]:
        """Hold the creation lock for the credential's link key, if enabled.

        ``before_create`` and the insert must both run inside this block.
        """
        if self.creation_locks is None or not self.linking_settings.serialize_creation:
            yield
            return

        async with self.creation_locks.hold(credential.link_key):
            yield

    async def before_create(self, credential: UserCredential) -> None:
        """Reject a new credential whose external account is already linked.

        The check ignores the owning user: the same external account cannot
        be linked twice, to one user or to two.

        Args:
            credential: Credential about to be inserted

        Raises:
            DuplicateLinkError: If a credential with the same provider and
                external ID already exists
        """
        with logfire.span(
            "consistency_guard.before_create",
            provider=credential.provider.root,
            external_id=credential.external_id,
        ):
            existing = await self.credential_repository.find_by_provider(
                credential.provider, credential.external_id
            )
            if existing:
                logfire.warn(
                    "Credentials already linked",
                    provider=credential.provider.root,
                    external_id=credential.external_id,
                    existing_credential_id=str(existing.id),
                    existing_user_id=str(existing.user_id),
                    requested_user_id=str(credential.user_id),
                )
                raise DuplicateLinkError(
                    credential.provider.root, credential.external_id
                )

    def before_update(
        self, credential: UserCredential, changes: Mapping[str, Any]
    ) -> CredentialUpdate:
        """Turn a raw change-set into an update that cannot touch identity fields.

        ``provider`` and ``external_id`` are dropped whether or not they
        differ from the stored values.

        Args:
            credential: Credential being updated
            changes: Raw field values requested by the caller

        Returns:
            Typed change-set

        Raises:
            MalformedLinkError: If the change-set names unknown fields or
                carries invalid values
        """
        dropped = sorted(IMMUTABLE_FIELDS.intersection(changes))
        if dropped:
            logfire.warn(
                "Immutable credential fields dropped from update",
                credential_id=str(credential.id),
                fields=dropped,
            )

        allowed = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
        try:
            return CredentialUpdate.model_validate(allowed)
        except PydanticValidationError as e:
            raise MalformedLinkError(f"Invalid credential update: {e}") from e

    def identity_provider(self, provider: ProviderName) -> ProviderName:
        """Name the credential's identity mirror is stored under.

        Raises:
            pydantic.ValidationError: If the login variant is not a valid
                provider name (for instance, longer than the column)
        """
        return self.user_identity_service.login_provider(provider)

    def to_identity(self, credential: UserCredential) -> UserIdentity:
        """Build the identity mirror of a credential.

        Works on a deep copy so the persisted credential is never shared with
        the identity. The identity gets a fresh ID and the login variant of
        the provider name.
        """
        data = deepcopy(credential.model_dump(exclude={"id"}))
        data["provider"] = self.identity_provider(credential.provider)
        return UserIdentity(id=IdentityId(uuid4()), **data)

    async def after_save(self, credential: UserCredential) -> UserIdentity:
        """Mirror a persisted credential into the identity registry.

        Runs after creates and updates alike. When the identity already
        exists it is returned as stored, so a refreshed credential does not
        refresh its identity.

        Args:
            credential: Credential as persisted

        Returns:
            The stored identity

        Raises:
            Exception: Any identity store failure, unchanged. The credential
                write is not rolled back.
        """
        identity = self.to_identity(credential)
        try:
            return await self.user_identity_service.mirror(identity)
        except Exception as e:
            logfire.error(
                "Identity mirror failed, credential left without identity",
                credential_id=str(credential.id),
                provider=identity.provider.root,
                external_id=credential.external_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
