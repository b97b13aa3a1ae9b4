from __future__ import annotations

import asyncio
import math
from typing import Dict, Optional, Sequence, Tuple

from pastebox.db.store import Clock, system_clock


class MemoryStore:
    """In-process KeyValueStore for local runs and tests.

    Expiry is evaluated lazily against ``clock`` so tests can move time
    forward without sleeping. Each call yields to the event loop once before
    touching state, then runs without awaiting, which makes every single
    call atomic the way a Redis command is.
    """

    def __init__(self, clock: Clock = system_clock):
        self._clock = clock
        self._values: Dict[str, str] = {}
        self._sorted_sets: Dict[str, Dict[str, float]] = {}
        self._expires_at: Dict[str, float] = {}

    def _purge(self, key: str) -> None:
        deadline = self._expires_at.get(key)
        if deadline is not None and deadline <= self._clock():
            self._values.pop(key, None)
            self._sorted_sets.pop(key, None)
            self._expires_at.pop(key, None)

    def _exists(self, key: str) -> bool:
        self._purge(key)
        return key in self._values or key in self._sorted_sets

    async def get(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        self._purge(key)
        return self._values.get(key)

    async def set(self, key: str, value: str, expire_seconds: int) -> None:
        await asyncio.sleep(0)
        self._sorted_sets.pop(key, None)
        self._values[key] = value
        self._expires_at[key] = self._clock() + expire_seconds

    async def delete(self, key: str) -> bool:
        await asyncio.sleep(0)
        existed = self._exists(key)
        self._values.pop(key, None)
        self._sorted_sets.pop(key, None)
        self._expires_at.pop(key, None)
        return existed

    async def zadd(self, key: str, score: float, member: str) -> None:
        await asyncio.sleep(0)
        self._purge(key)
        self._sorted_sets.setdefault(key, {})[member] = score

    async def zrem(self, key: str, member: str) -> None:
        await asyncio.sleep(0)
        self._purge(key)
        members = self._sorted_sets.get(key)
        if members is None:
            return
        members.pop(member, None)
        if not members:
            # Redis drops empty sorted sets together with their expiry
            self._sorted_sets.pop(key, None)
            self._expires_at.pop(key, None)

    async def zrange_rev(self, key: str, start: int, stop: int) -> Sequence[str]:
        await asyncio.sleep(0)
        self._purge(key)
        members = self._sorted_sets.get(key, {})
        ordered = sorted(members.items(), key=lambda item: (item[1], item[0]), reverse=True)
        end = None if stop == -1 else stop + 1
        return [member for member, _ in ordered[start:end]]

    async def expire(self, key: str, seconds: int) -> None:
        await asyncio.sleep(0)
        if self._exists(key):
            self._expires_at[key] = self._clock() + seconds

    def _remaining(self, key: str) -> Optional[int]:
        if not self._exists(key):
            return None
        deadline = self._expires_at.get(key)
        if deadline is None:
            return None
        return max(0, math.ceil(deadline - self._clock()))

    async def ttl(self, key: str) -> Optional[int]:
        await asyncio.sleep(0)
        return self._remaining(key)

    async def incr_window(self, key: str, window_seconds: int) -> Tuple[int, int]:
        await asyncio.sleep(0)
        self._purge(key)
        count = int(self._values.get(key, "0")) + 1
        self._values[key] = str(count)
        if count == 1 or key not in self._expires_at:
            self._expires_at[key] = self._clock() + window_seconds
        return count, self._remaining(key) or 0

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._values.clear()
        self._sorted_sets.clear()
        self._expires_at.clear()
