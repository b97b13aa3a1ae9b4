# tests/unit/test_rate_limiter.py
# Fixed window limiter: quota, window reset, concurrent checks

import asyncio

import pytest

from pastebox.constants import rate_limit_key
from pastebox.db.memory_store import MemoryStore
from pastebox.services.rate_limiter import FixedWindowRateLimiter


class NoTtlStore(MemoryStore):
    """Store that cannot report how long the window has left."""

    async def incr_window(self, key, window_seconds):
        count, _ = await super().incr_window(key, window_seconds)
        return count, 0


class TestFixedWindowRateLimiter:
    """Test the store-backed fixed window limiter."""

    @pytest.mark.asyncio
    async def test_fourth_request_in_window_is_rejected(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=3, clock=clock)

        results = [await limiter.check("u") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    @pytest.mark.asyncio
    async def test_window_reset_allows_again(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=3, clock=clock)
        for _ in range(4):
            await limiter.check("u")

        clock.advance(60)
        status = await limiter.check("u")

        assert status.allowed
        assert status.remaining == 2

    @pytest.mark.asyncio
    async def test_rejections_do_not_extend_the_window(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=1, clock=clock)
        await limiter.check("u")

        clock.advance(30)
        denied = await limiter.check("u")
        assert not denied.allowed
        assert denied.retry_after == 30
        assert denied.reset_at.timestamp() == pytest.approx(clock() + 30)

        clock.advance(30)
        assert (await limiter.check("u")).allowed

    @pytest.mark.asyncio
    async def test_different_users_have_separate_limits(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=2, clock=clock)
        for _ in range(3):
            await limiter.check("user1")

        assert (await limiter.check("user2")).allowed

    @pytest.mark.asyncio
    async def test_concurrent_checks_never_exceed_max(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=5, clock=clock)

        results = await asyncio.gather(*(limiter.check("u") for _ in range(25)))

        assert sum(r.allowed for r in results) == 5
        assert sorted(r.remaining for r in results if r.allowed) == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_counter_key_expires_with_the_window(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=3, clock=clock)
        await limiter.check("u")

        assert await store.ttl(rate_limit_key("u")) == 60
        clock.advance(60)
        assert await store.get(rate_limit_key("u")) is None

    @pytest.mark.asyncio
    async def test_reset_falls_back_to_full_window_without_ttl(self, clock):
        store = NoTtlStore(clock=clock)
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=1, clock=clock)
        await limiter.check("u")

        status = await limiter.check("u")

        assert not status.allowed
        assert status.retry_after == 60
        assert status.reset_at.timestamp() == pytest.approx(clock() + 60)

    @pytest.mark.asyncio
    async def test_peek_does_not_consume(self, store, clock):
        limiter = FixedWindowRateLimiter(store, window_size=60, max_requests=3, clock=clock)

        fresh = await limiter.peek("u")
        assert fresh.allowed and fresh.remaining == 3

        await limiter.check("u")
        first = await limiter.peek("u")
        second = await limiter.peek("u")
        assert first.remaining == second.remaining == 2
