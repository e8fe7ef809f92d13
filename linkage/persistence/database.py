"""Async engine and session management for PostgreSQL."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from linkage.config import Settings
from linkage.util.error import ConfigurationError

ASYNC_DRIVER_PREFIX = "postgresql+asyncpg://"


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the engine described by ``settings.database``.

    Raises:
        ConfigurationError: If the URL does not use the asyncpg driver
    """
    url = settings.database_url
    if not url.startswith(ASYNC_DRIVER_PREFIX):
        raise ConfigurationError(f"DATABASE__URL must start with {ASYNC_DRIVER_PREFIX}")

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Repositories flush explicitly; rows are returned as domain models, so
    # nothing needs refreshing after commit.
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def get_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Unit of work: commit when the block exits cleanly, roll back otherwise.

    A credential write and its identity mirror share this transaction only
    when they run in the same request scope.
    """
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()
