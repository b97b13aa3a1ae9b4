# pastebox/services/notifier.py
# Notification port for paste mutations
# Consumed by an out-of-process real-time layer; delivery is best effort

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Protocol

from pastebox.constants import paste_event_key
from pastebox.db.store import Clock, KeyValueStore, system_clock
from pastebox.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class PasteEvent(str, Enum):
    CREATED = "created"
    DELETED = "deleted"


class Notifier(Protocol):
    async def notify(self, event: PasteEvent, paste_id: str) -> None:
        ...


class NullNotifier:
    """Notifier for deployments without a real-time layer."""

    async def notify(self, event: PasteEvent, paste_id: str) -> None:
        return None


class StoreEventNotifier:
    """Leaves a short-lived event marker in the store for pollers.

    Failures are logged and never fail the mutation that triggered them.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: int = 10, clock: Clock = system_clock):
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock

    async def notify(self, event: PasteEvent, paste_id: str) -> None:
        payload = json.dumps({
            "event": event.value,
            "paste_id": paste_id,
            "timestamp": int(self._clock() * 1000),
        })
        try:
            await self._store.set(paste_event_key(paste_id), payload, self._ttl)
        except StoreUnavailable:
            logger.warning(f"Could not publish '{event.value}' event for paste {paste_id}")
