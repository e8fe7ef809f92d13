"""Keyed asyncio locks.

Serializes coroutines that share a key while letting different keys run
concurrently. Locks are created on first use and dropped once no coroutine
holds or waits on them, so the registry does not grow with every key seen.
"""

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

from linkage.util.logging import get_logger

logger = get_logger(__name__)


class KeyedLock:
    """Registry of asyncio locks indexed by an arbitrary hashable key.

    Example:
        >>> locks = KeyedLock()
        >>> async with locks.hold(("github", "gh42")):
        ...     await check_then_insert()
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Acquire the lock for ``key`` for the duration of the block."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._waiters[key] = self._waiters.get(key, 0) + 1
        if lock.locked():
            logger.debug(f"Waiting on held lock for {key!r}")

        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        """Whether some coroutine currently holds the lock for ``key``."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        return len(self._locks)
