"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from linkage.config import Settings
from linkage.domain.repository import UserCredentialRepository, UserIdentityRepository
from linkage.persistence.database import (
    create_engine,
    create_session_factory,
    get_session,
)
from linkage.persistence.repository import (
    PostgresUserCredentialRepository,
    PostgresUserIdentityRepository,
)
from linkage.util.di.base import ProviderBase
from linkage.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL-backed repositories sharing one session per request."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """One transaction per request, committed when the scope closes."""
        async with get_session(session_factory) as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_credential_repository(
        self, session: AsyncSession
    ) -> UserCredentialRepository:
        """Provide UserCredential repository."""
        return PostgresUserCredentialRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_identity_repository(
        self, session: AsyncSession
    ) -> UserIdentityRepository:
        """Provide UserIdentity repository."""
        return PostgresUserIdentityRepository(session)
