from __future__ import annotations

import logging

from pastebox.config import Settings
from pastebox.db.memory_store import MemoryStore
from pastebox.db.redis_store import RedisStore
from pastebox.db.store import KeyValueStore
from pastebox.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> KeyValueStore:
    """Build the configured backend without touching the network."""
    if settings.STORE_BACKEND == "memory":
        return MemoryStore()
    return RedisStore.from_settings(settings)


async def init_store(settings: Settings) -> KeyValueStore:
    """Create the process-wide store once at startup and verify it answers.

    Missing configuration or an unreachable backend is fatal here rather
    than a surprise on the first request.
    """
    store = create_store(settings)
    try:
        ok = await store.ping()
    except StoreUnavailable:
        await store.close()
        raise
    if not ok:
        await store.close()
        raise StoreUnavailable("Store did not answer ping")
    logger.info(f"Store initialized (backend={settings.STORE_BACKEND})")
    return store
