"""
AwardBoard Backend - Session Store Unit Tests
===============================================

What we test:
    ✅ create/resolve round trip, unique tokens
    ✅ Unknown and idle-expired tokens raise SessionExpiredError
    ✅ resolve() slides the idle window
    ✅ destroy() is idempotent; purge_expired() drops stale sessions
"""

import pytest

from awardboard.exceptions import SessionExpiredError
from awardboard.services.session_store import InMemorySessionStore


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestInMemorySessionStore:

    def setup_method(self):
        self.clock = FakeClock()
        self.store = InMemorySessionStore(idle_timeout=60, clock=self.clock)

    @pytest.mark.asyncio
    async def test_resolve_returns_username(self):
        token = await self.store.create("alice")
        assert await self.store.resolve(token) == "alice"

    @pytest.mark.asyncio
    async def test_tokens_are_unique(self):
        first = await self.store.create("alice")
        second = await self.store.create("alice")
        assert first != second
        assert await self.store.count() == 2

    @pytest.mark.asyncio
    async def test_unknown_token_raises(self):
        with pytest.raises(SessionExpiredError):
            await self.store.resolve("nope")

    @pytest.mark.asyncio
    async def test_idle_session_expires(self):
        token = await self.store.create("alice")
        self.clock.now = 61
        with pytest.raises(SessionExpiredError):
            await self.store.resolve(token)
        assert await self.store.count() == 0

    @pytest.mark.asyncio
    async def test_resolve_refreshes_idle_window(self):
        token = await self.store.create("alice")
        self.clock.now = 50
        await self.store.resolve(token)
        self.clock.now = 100
        assert await self.store.resolve(token) == "alice"

    @pytest.mark.asyncio
    async def test_destroy_is_idempotent(self):
        token = await self.store.create("alice")
        await self.store.destroy(token)
        await self.store.destroy(token)
        with pytest.raises(SessionExpiredError):
            await self.store.resolve(token)

    @pytest.mark.asyncio
    async def test_purge_expired(self):
        await self.store.create("alice")
        self.clock.now = 30
        fresh = await self.store.create("bob")
        self.clock.now = 70
        assert await self.store.purge_expired() == 1
        assert await self.store.resolve(fresh) == "bob"
