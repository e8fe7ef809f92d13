"""Credential linker domain service."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from linkage.domain.error import DuplicateLinkError, MalformedLinkError, NotFoundError
from linkage.domain.model.credential import UserCredential
from linkage.domain.repository.credential import UserCredentialRepository
from linkage.domain.value import (
    AuthScheme,
    CredentialId,
    LinkOptions,
    ProviderName,
    UserId,
)

from .base import Service
from .consistency_guard import ConsistencyGuard


class CredentialLinker(Service):
    """Links third-party accounts to local users.

    Every write goes through the consistency guard: ``before_create`` or
    ``before_update`` first, then the store, then ``after_save``.
    """

    def __init__(
        self,
        credential_repository: UserCredentialRepository,
        consistency_guard: ConsistencyGuard,
    ) -> None:
        """Initialize credential linker.

        Args:
            credential_repository: Credential repository
            consistency_guard: Pre-write and post-write rules
        """
        self.credential_repository = credential_repository
        self.consistency_guard = consistency_guard

    async def link(
        self,
        user_id: UserId,
        provider: ProviderName | str,
        auth_scheme: AuthScheme | str,
        profile: Mapping[str, Any],
        credentials: Mapping[str, Any],
        options: LinkOptions | Mapping[str, Any] | None = None,
    ) -> UserCredential:
        """Link a third-party account to a user, or refresh an existing link.

        Steps:
        1. Look up the user's credential for (provider, profile["id"])
        2. If found: overwrite profile, credentials and modified
        3. If not: create a new credential (rejected if the external
           account is linked to anyone already)

        Args:
            user_id: The local user
            provider: Provider name, e.g. "github" or "facebook-link"
            auth_scheme: Auth protocol, e.g. "oAuth 2.0"
            profile: Provider profile; must carry the external account ID at "id"
            credentials: Tokens returned by the handshake
            options: Reserved; unknown keys are ignored

        Returns:
            The created or refreshed credential

        Raises:
            MalformedLinkError: If a parameter is missing or invalid
            DuplicateLinkError: If the external account is linked already
        """
        user_id = self._user_id(user_id)
        provider_name = self._provider_name(provider)
        scheme = self._auth_scheme(auth_scheme)
        external_id = self._external_id(profile)
        if not isinstance(credentials, Mapping):
            raise MalformedLinkError(
                "Credentials must be a mapping", field="credentials"
            )
        if options is not None and not isinstance(options, LinkOptions):
            options = LinkOptions.model_validate(dict(options))
        if options is not None and options.model_extra:
            logfire.info(
                "Ignoring unrecognized link options", keys=sorted(options.model_extra)
            )

        with logfire.span(
            "credential_linker.link",
            user_id=str(user_id),
            provider=provider_name.root,
            auth_scheme=scheme.value,
            external_id=external_id,
        ):
            existing = await self.credential_repository.find_one(
                user_id, provider_name, external_id
            )
            now = datetime.now(timezone.utc)

            if existing:
                logfire.info(
                    "Refreshing existing link",
                    credential_id=str(existing.id),
                    user_id=str(user_id),
                )
                return await self._update(
                    existing,
                    {
                        "profile": dict(profile),
                        "credentials": dict(credentials),
                        "modified": now,
                    },
                )

            credential = UserCredential(
                id=CredentialId(uuid4()),
                user_id=user_id,
                provider=provider_name,
                auth_scheme=scheme,
                external_id=external_id,
                profile=dict(profile),
                credentials=dict(credentials),
                created=now,
                modified=now,
            )
            return await self._create(credential)

    async def update_credential(
        self, credential_id: CredentialId, changes: Mapping[str, Any]
    ) -> UserCredential:
        """Update an existing credential.

        ``provider`` and ``external_id`` in ``changes`` are ignored.

        Args:
            credential_id: Credential to update
            changes: Field values to overwrite

        Returns:
            Updated credential

        Raises:
            NotFoundError: If the credential does not exist
            MalformedLinkError: If the change-set is invalid
        """
        with logfire.span(
            "credential_linker.update_credential", credential_id=str(credential_id)
        ):
            existing = await self.credential_repository.find_by_id(credential_id)
            if not existing:
                logfire.warn("Credential not found", credential_id=str(credential_id))
                raise NotFoundError("Credential", str(credential_id))
            return await self._update(existing, changes)

    async def get_credentials_for_user(self, user_id: UserId) -> list[UserCredential]:
        """Get all credentials linked to a user."""
        with logfire.span(
            "credential_linker.get_credentials_for_user", user_id=str(user_id)
        ):
            return await self.credential_repository.find_all_by_user_id(user_id)

    async def _create(self, credential: UserCredential) -> UserCredential:
        async with self.consistency_guard.creation_window(credential):
            await self.consistency_guard.before_create(credential)
            try:
                saved = await self.credential_repository.create(credential)
            except IntegrityError:
                # Another writer inserted the same link after our check
                logfire.warn(
                    "Duplicate link rejected by store",
                    provider=credential.provider.root,
                    external_id=credential.external_id,
                    user_id=str(credential.user_id),
                )
                raise DuplicateLinkError(
                    credential.provider.root, credential.external_id
                ) from None

        logfire.info(
            "Credential linked",
            credential_id=str(saved.id),
            user_id=str(saved.user_id),
            provider=saved.provider.root,
        )
        await self.consistency_guard.after_save(saved)
        return saved

    async def _update(
        self, existing: UserCredential, changes: Mapping[str, Any]
    ) -> UserCredential:
        update = self.consistency_guard.before_update(existing, changes)
        saved = await self.credential_repository.update(existing.id, update)
        logfire.info(
            "Credential updated",
            credential_id=str(saved.id),
            fields=sorted(update.changed_values()),
        )
        await self.consistency_guard.after_save(saved)
        return saved

    @staticmethod
    def _user_id(user_id: UserId | str) -> UserId:
        if user_id is None:
            raise MalformedLinkError("User ID is required", field="user_id")
        if isinstance(user_id, UUID):
            return UserId(user_id)
        try:
            return UserId(UUID(str(user_id)))
        except ValueError as e:
            raise MalformedLinkError(
                f"User ID must be a UUID: {user_id!r}", field="user_id"
            ) from e

    def _provider_name(self, provider: ProviderName | str) -> ProviderName:
        # The identity mirror's name must be valid too, or the credential
        # would be written without one.
        try:
            name = (
                provider
                if isinstance(provider, ProviderName)
                else ProviderName(provider)
            )
            self.consistency_guard.identity_provider(name)
        except PydanticValidationError as e:
            raise MalformedLinkError(
                f"Invalid provider: {provider!r}", field="provider"
            ) from e
        return name

    @staticmethod
    def _auth_scheme(auth_scheme: AuthScheme | str) -> AuthScheme:
        try:
            return AuthScheme(auth_scheme)
        except ValueError as e:
            raise MalformedLinkError(
                f"Unsupported auth scheme: {auth_scheme!r}", field="auth_scheme"
            ) from e

    @staticmethod
    def _external_id(profile: Mapping[str, Any]) -> str:
        if not isinstance(profile, Mapping):
            raise MalformedLinkError("Profile must be a mapping", field="profile")
        external_id = profile.get("id")
        if external_id is None or str(external_id) == "":
            raise MalformedLinkError(
                "Profile has no external account ID", field="profile.id"
            )
        return str(external_id)
