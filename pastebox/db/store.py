from __future__ import annotations

import time
from typing import Callable, Optional, Protocol, Sequence, Tuple


# Returns the current time as epoch seconds; injectable so expiry can be simulated.
Clock = Callable[[], float]

system_clock: Clock = time.time


class KeyValueStore(Protocol):
    """Contract every key-value backend must satisfy.

    Scalar keys: get / set-with-expiry / delete.
    Sorted sets: add / remove / reverse range / expire, scored by a number.
    Every call either returns or raises ``StoreUnavailable``; backend
    specific exceptions never escape an implementation.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, expire_seconds: int) -> None:
        ...

    async def delete(self, key: str) -> bool:
        ...

    async def zadd(self, key: str, score: float, member: str) -> None:
        ...

    async def zrem(self, key: str, member: str) -> None:
        ...

    async def zrange_rev(self, key: str, start: int, stop: int) -> Sequence[str]:
        """Members ordered by score, highest first; ``stop`` is inclusive."""
        ...

    async def expire(self, key: str, seconds: int) -> None:
        ...

    async def ttl(self, key: str) -> Optional[int]:
        """Remaining seconds, or None when the key is missing or never expires."""
        ...

    async def incr_window(self, key: str, window_seconds: int) -> Tuple[int, int]:
        """Atomically increment a counter and return ``(count, ttl)``.

        The expiry is set only when this increment created the key (or the
        key somehow carries no expiry), so a window is never extended.
        """
        ...

    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        ...
