"""Unit tests for KeyedLock."""

import asyncio

import pytest

from linkage.util.locking import KeyedLock


class TestKeyedLock:
    """Tests for KeyedLock.hold()."""

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        """Should never let two holders of one key overlap."""
        locks = KeyedLock()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("k"):
                events.append(f"{name}:in")
                await asyncio.sleep(0.01)
                events.append(f"{name}:out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (
            ["a:in", "a:out", "b:in", "b:out"],
            ["b:in", "b:out", "a:in", "a:out"],
        )

    @pytest.mark.asyncio
    async def test_different_keys_run_concurrently(self):
        """Should let holders of different keys overlap."""
        locks = KeyedLock()
        inside = asyncio.Event()

        async def first() -> None:
            async with locks.hold("a"):
                await asyncio.wait_for(inside.wait(), timeout=1)

        async def second() -> None:
            async with locks.hold("b"):
                inside.set()

        await asyncio.gather(first(), second())

    @pytest.mark.asyncio
    async def test_registry_is_emptied(self):
        """Should drop a key once nobody holds or waits on it."""
        locks = KeyedLock()

        async with locks.hold(("github", "gh42")):
            assert locks.active_keys() == 1
            assert locks.is_locked(("github", "gh42"))

        assert locks.active_keys() == 0
        assert not locks.is_locked(("github", "gh42"))

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        """Should release the lock when the block raises."""
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("k"):
                raise RuntimeError("boom")

        assert not locks.is_locked("k")
        assert locks.active_keys() == 0
