# pastebox/services/rate_limiter.py
# Fixed window rate limiter for paste creation
# One counter key per user in the shared store; the window start is the
# key's own expiry

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from pastebox.constants import rate_limit_key
from pastebox.db.store import Clock, KeyValueStore, system_clock
from pastebox.observability.metrics import RATE_LIMIT_REJECTIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitStatus:
    """Result of a rate limit check."""

    allowed: bool
    remaining: int
    reset_at: datetime
    retry_after: int  # seconds until the window resets
    limit: int


class FixedWindowRateLimiter:
    """
    Fixed window counter, max_requests per window_size seconds per user.

    The count is read and incremented by one atomic store call, so
    concurrent checks from the same user can never both see a free slot.
    Denied checks still bump the counter, but the expiry is only set when
    the key is created, so the window closes on schedule regardless.
    """

    def __init__(
        self,
        store: KeyValueStore,
        window_size: int = 3600,
        max_requests: int = 30,
        clock: Clock = system_clock,
    ):
        self._store = store
        self.window_size = window_size  # seconds
        self.max_requests = max_requests
        self._clock = clock

    def _status(self, allowed: bool, remaining: int, ttl: Optional[int]) -> RateLimitStatus:
        # Fall back to a full window when the store cannot report a TTL
        seconds = ttl if ttl and ttl > 0 else self.window_size
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        return RateLimitStatus(
            allowed=allowed,
            remaining=remaining,
            reset_at=now + timedelta(seconds=seconds),
            retry_after=seconds,
            limit=self.max_requests,
        )

    async def check(self, user_id: str) -> RateLimitStatus:
        """Consume one slot for user_id and report whether it was allowed."""
        count, ttl = await self._store.incr_window(rate_limit_key(user_id), self.window_size)

        if count <= self.max_requests:
            return self._status(True, self.max_requests - count, ttl)

        RATE_LIMIT_REJECTIONS.inc()
        logger.warning(f"Rate limit exceeded for user {user_id} ({count}/{self.max_requests})")
        return self._status(False, 0, ttl)

    async def peek(self, user_id: str) -> RateLimitStatus:
        """Current standing without consuming a slot."""
        key = rate_limit_key(user_id)
        raw = await self._store.get(key)
        if raw is None:
            return self._status(True, self.max_requests, None)
        count = int(raw)
        ttl = await self._store.ttl(key)
        return self._status(count < self.max_requests, max(0, self.max_requests - count), ttl)
