# pastebox/repositories/paste_repository.py
# Repository for the primary paste record

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from pydantic import ValidationError as PydanticValidationError
from ulid import ULID

from pastebox.constants import paste_key
from pastebox.db.store import Clock, KeyValueStore, system_clock
from pastebox.models.paste import Paste, Visibility

logger = logging.getLogger(__name__)


class PasteRepository:
    """Owns the canonical paste record and its expiry.

    Index maintenance is not done here; see PasteIndex.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: int, clock: Clock = system_clock):
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    async def create(
        self,
        owner_id: str,
        content: str,
        visibility: Visibility,
        shared_with: Iterable[str] = (),
    ) -> Paste:
        """Persist a new paste under its primary key with expiry = TTL.

        Content size and payload shape are validated before this call.
        """
        now = float(self._clock())
        created_at = datetime.fromtimestamp(now, tz=timezone.utc)
        paste = Paste(
            paste_id=str(ULID.from_timestamp(now)),
            user_id=owner_id,
            content=content,
            visibility=visibility,
            shared_with=list(shared_with) if visibility is Visibility.PRIVATE else [],
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self._ttl),
        )
        await self._store.set(paste_key(paste.paste_id), paste.to_json(), self._ttl)
        return paste

    async def get(self, paste_id: str) -> Optional[Paste]:
        """Return the paste, or None when it never existed or has expired."""
        raw = await self._store.get(paste_key(paste_id))
        if raw is None:
            return None
        try:
            return Paste.from_json(raw)
        except PydanticValidationError:
            logger.warning(f"Discarding undecodable paste record id={paste_id}")
            return None

    async def delete(self, paste_id: str, requester_id: str) -> bool:
        """Remove the primary record if requester owns it.

        False when the paste is absent or owned by someone else; sharing
        never grants delete rights.
        """
        paste = await self.get(paste_id)
        if paste is None or paste.user_id != requester_id:
            return False
        await self.remove(paste)
        return True

    async def remove(self, paste: Paste) -> None:
        """Drop the primary key of an already fetched and authorized paste."""
        await self._store.delete(paste_key(paste.paste_id))
