# pastebox/services/access_resolver.py

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from pastebox.models.paste import Paste
from pastebox.repositories.paste_index import PasteIndex
from pastebox.repositories.paste_repository import PasteRepository

logger = logging.getLogger(__name__)


def can_view(paste: Paste, user_id: Optional[str]) -> bool:
    """Public pastes are visible to all; private ones to owner and recipients."""
    if paste.is_public:
        return True
    if user_id is None:
        return False
    return paste.user_id == user_id or paste.is_shared_with(user_id)


class AccessResolver:
    """Turns index reads into the filtered, deduplicated pastes a user may see."""

    def __init__(self, repository: PasteRepository, index: PasteIndex):
        self._repo = repository
        self._index = index

    async def _resolve(self, ids: Sequence[str]) -> List[Paste]:
        """Fetch records concurrently, dropping tombstones, keeping index order."""
        if not ids:
            return []
        records = await asyncio.gather(*(self._repo.get(paste_id) for paste_id in ids))
        pastes = [p for p in records if p is not None]
        dropped = len(ids) - len(pastes)
        if dropped:
            logger.debug(f"Dropped {dropped} index entries without a backing record")
        return pastes

    async def list_owner(self, user_id: str, limit: int) -> List[Paste]:
        return await self._resolve(await self._index.owner_ids(user_id, limit))

    async def list_public(self, limit: int) -> List[Paste]:
        return await self._resolve(await self._index.public_ids(limit))

    async def list_private(self, user_id: str, limit: int) -> List[Paste]:
        pastes = await self._resolve(await self._index.private_ids(user_id, limit))
        # Re-check against the record itself instead of trusting the index
        return [
            p for p in pastes
            if p.user_id == user_id or p.is_shared_with(user_id)
        ]

    async def list_accessible(self, user_id: str, limit: int) -> List[Paste]:
        """Public and private pastes for the user, newest first, each id once."""
        if limit <= 0:
            return []
        public, private = await asyncio.gather(
            self.list_public(limit),
            self.list_private(user_id, limit),
        )
        unique: Dict[str, Paste] = {}
        for paste in [*public, *private]:
            unique.setdefault(paste.paste_id, paste)
        ordered = sorted(unique.values(), key=lambda p: p.created_at, reverse=True)
        return ordered[:limit]
