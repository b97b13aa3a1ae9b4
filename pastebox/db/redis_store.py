from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Optional, Sequence, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from pastebox.config import Settings
from pastebox.errors import StoreUnavailable
from pastebox.observability.metrics import STORE_ERRORS

logger = logging.getLogger(__name__)


# INCR and first-time EXPIRE in one round trip so concurrent checks cannot
# both observe the same count.
INCR_WINDOW_LUA = """
local count = redis.call('INCR', KEYS[1])
local ttl = redis.call('TTL', KEYS[1])
if count == 1 or ttl < 0 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
    ttl = tonumber(ARGV[1])
end
return {count, ttl}
"""


class RedisStore:
    """KeyValueStore backed by redis.asyncio.

    Every call is bounded by ``timeout`` seconds; timeouts and Redis errors
    are logged with their cause and re-raised as StoreUnavailable.
    """

    def __init__(self, client: aioredis.Redis, timeout: float = 5.0):
        self._client = client
        self._timeout = timeout
        self._incr_window = client.register_script(INCR_WINDOW_LUA)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisStore":
        if not settings.REDIS_URL:
            raise StoreUnavailable(
                "Redis configuration is missing",
                details={"missing": ["REDIS_URL"]},
            )
        kwargs: dict[str, Any] = {
            "decode_responses": True,
            "socket_timeout": settings.STORE_TIMEOUT_SECONDS,
            "socket_connect_timeout": settings.STORE_TIMEOUT_SECONDS,
        }
        if settings.REDIS_TOKEN:
            kwargs["password"] = settings.REDIS_TOKEN
        client = aioredis.from_url(settings.REDIS_URL, **kwargs)
        return cls(client, timeout=settings.STORE_TIMEOUT_SECONDS)

    async def _call(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            STORE_ERRORS.labels(operation=operation).inc()
            logger.error(f"Redis {operation} timed out after {self._timeout}s")
            raise StoreUnavailable() from e
        except RedisError as e:
            STORE_ERRORS.labels(operation=operation).inc()
            logger.error(f"Redis {operation} failed: {type(e).__name__}: {e}")
            raise StoreUnavailable() from e

    async def get(self, key: str) -> Optional[str]:
        return await self._call("get", self._client.get(key))

    async def set(self, key: str, value: str, expire_seconds: int) -> None:
        await self._call("set", self._client.set(key, value, ex=expire_seconds))

    async def delete(self, key: str) -> bool:
        deleted = await self._call("delete", self._client.delete(key))
        return bool(deleted)

    async def zadd(self, key: str, score: float, member: str) -> None:
        await self._call("zadd", self._client.zadd(key, {member: score}))

    async def zrem(self, key: str, member: str) -> None:
        await self._call("zrem", self._client.zrem(key, member))

    async def zrange_rev(self, key: str, start: int, stop: int) -> Sequence[str]:
        members = await self._call(
            "zrange", self._client.zrange(key, start, stop, desc=True)
        )
        return list(members or [])

    async def expire(self, key: str, seconds: int) -> None:
        await self._call("expire", self._client.expire(key, seconds))

    async def ttl(self, key: str) -> Optional[int]:
        remaining = await self._call("ttl", self._client.ttl(key))
        # -2: missing key, -1: no expiry
        if remaining is None or remaining < 0:
            return None
        return int(remaining)

    async def incr_window(self, key: str, window_seconds: int) -> Tuple[int, int]:
        count, ttl = await self._call(
            "incr_window",
            self._incr_window(keys=[key], args=[window_seconds]),
        )
        return int(count), int(ttl)

    async def ping(self) -> bool:
        return bool(await self._call("ping", self._client.ping()))

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis store connections closed")
