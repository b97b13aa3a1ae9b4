# pastebox/repositories/paste_index.py
# Secondary access paths: owner, public and per-recipient private indices

from __future__ import annotations

from typing import List, Sequence

from pastebox.constants import PUBLIC_PASTES_KEY, owner_index_key, private_index_key
from pastebox.db.store import KeyValueStore
from pastebox.models.paste import Paste


class PasteIndex:
    """Sorted-set indices that reference paste ids by creation time.

    Writes are independent store calls with no cross-key transaction. A
    crash part way leaves either an unindexed record (expires on its own)
    or an index entry without a record (dropped at read time). Both heal
    through TTL; nothing is rolled back.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: int):
        self._store = store
        self._ttl = ttl_seconds

    @staticmethod
    def keys_for(paste: Paste) -> List[str]:
        """Every index key the paste belongs to, owner index first."""
        keys = [owner_index_key(paste.user_id)]
        if paste.is_public:
            keys.append(PUBLIC_PASTES_KEY)
        else:
            keys.append(private_index_key(paste.user_id))
            keys.extend(
                private_index_key(u) for u in paste.shared_with if u != paste.user_id
            )
        return list(dict.fromkeys(keys))

    async def add(self, paste: Paste) -> None:
        score = paste.created_at_ms
        for key in self.keys_for(paste):
            await self._store.zadd(key, score, paste.paste_id)
            # Refresh so the index never expires before its newest entry
            await self._store.expire(key, self._ttl)

    async def remove(self, paste: Paste) -> None:
        """Remove the paste from the indices derived from the stored record."""
        for key in self.keys_for(paste):
            await self._store.zrem(key, paste.paste_id)

    async def _newest(self, key: str, limit: int) -> Sequence[str]:
        if limit <= 0:
            return []
        return await self._store.zrange_rev(key, 0, limit - 1)

    async def owner_ids(self, user_id: str, limit: int) -> Sequence[str]:
        return await self._newest(owner_index_key(user_id), limit)

    async def public_ids(self, limit: int) -> Sequence[str]:
        return await self._newest(PUBLIC_PASTES_KEY, limit)

    async def private_ids(self, user_id: str, limit: int) -> Sequence[str]:
        return await self._newest(private_index_key(user_id), limit)
