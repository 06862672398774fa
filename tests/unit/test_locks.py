"""Unit tests for per-user lock serialization."""

import asyncio

import pytest

from txnguard.domains.fraud.locks import UserLockRegistry


class TestUserLockRegistry:
    async def test_same_user_is_serialized(self):
        locks = UserLockRegistry()
        order: list[str] = []
        release = asyncio.Event()

        async def first():
            async with locks.hold("user-1"):
                order.append("first-in")
                await release.wait()
                order.append("first-out")

        async def second():
            async with locks.hold("user-1"):
                order.append("second-in")

        t1 = asyncio.create_task(first())
        await asyncio.sleep(0)
        t2 = asyncio.create_task(second())
        await asyncio.sleep(0)

        assert order == ["first-in"]
        release.set()
        await asyncio.gather(t1, t2)
        assert order == ["first-in", "first-out", "second-in"]

    async def test_different_users_do_not_contend(self):
        locks = UserLockRegistry()
        order: list[str] = []
        release = asyncio.Event()

        async def holder():
            async with locks.hold("user-1"):
                order.append("user-1-in")
                await release.wait()

        async def other():
            async with locks.hold("user-2"):
                order.append("user-2-in")

        t1 = asyncio.create_task(holder())
        await asyncio.sleep(0)
        await other()

        assert order == ["user-1-in", "user-2-in"]
        release.set()
        await t1

    async def test_idle_locks_are_dropped(self):
        locks = UserLockRegistry()
        async with locks.hold("user-1"):
            assert locks.active_users == {"user-1"}
        assert locks.active_users == set()

    async def test_released_on_error(self):
        locks = UserLockRegistry()
        with pytest.raises(RuntimeError):
            async with locks.hold("user-1"):
                raise RuntimeError("boom")

        assert locks.active_users == set()
        async with locks.hold("user-1"):
            pass
