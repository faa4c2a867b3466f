"""
Revealed-listings cache.

Read-through view of which listings a user owns. The ledger stays the
source of truth: entries are loaded from it and only extended after a
charge the ledger has confirmed.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from modules.ledger.interfaces import ICreditLedger

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class _Entry:
    listing_ids: set[str]
    loaded_at: float


class RevealedListingsCache:
    """Per-user set of revealed listing IDs with a freshness window."""

    def __init__(
        self,
        ledger: ICreditLedger,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ledger = ledger
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.loaded_at > self._ttl

    def _fresh(self, user_id: str) -> _Entry | None:
        entry = self._entries.get(user_id)
        if entry is not None and self._expired(entry, self._clock()):
            del self._entries[user_id]
            return None
        return entry

    def _evict_expired(self) -> None:
        now = self._clock()
        stale = [user_id for user_id, entry in self._entries.items() if self._expired(entry, now)]
        for user_id in stale:
            del self._entries[user_id]
        if stale:
            logger.debug(f"Evicted {len(stale)} expired cache entries")

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, user_id: str) -> frozenset[str]:
        """Listing IDs the user owns, loading from the ledger when stale."""
        entry = self._fresh(user_id)
        if entry is None:
            self._evict_expired()
            records = await self._ledger.list_revealed(user_id)
            entry = _Entry({r.listing_id for r in records}, self._clock())
            self._entries[user_id] = entry
            logger.debug(f"Loaded {len(entry.listing_ids)} revealed listing(s) for {user_id}")
        return frozenset(entry.listing_ids)

    async def contains(self, user_id: str, listing_id: str) -> bool:
        return listing_id in await self.get(user_id)

    def confirm(self, user_id: str, listing_ids: Iterable[str]) -> None:
        """
        Record listings the ledger has confirmed as owned.

        Users without a loaded entry are left alone; their next read
        loads the full set.
        """
        entry = self._entries.get(user_id)
        if entry is not None:
            entry.listing_ids.update(listing_ids)

    def invalidate(self, user_id: str) -> None:
        self._entries.pop(user_id, None)
