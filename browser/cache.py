"""In-memory result cache keyed by composed view keys, with LRU eviction.

Entries never expire on their own: a stale entry is still served while a
refetch runs, so age is only reported, not enforced.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable, Iterable, Optional

from api.client import VideoSummary
from browser.cache_key import CacheKey
from browser.models import CacheEntry


class QueryCache:

    def __init__(self, max_entries: int = 200, clock: Callable[[], float] = time.monotonic):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        """Return the entry for key (fresh or not) and mark it recently used."""
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
        return entry

    def put(self, key: CacheKey, results: Iterable[VideoSummary], total_count: int) -> CacheEntry:
        """Store a new entry, replacing any previous one for key."""
        entry = CacheEntry(results=tuple(results), total_count=total_count, fetched_at=self._clock())
        self._entries[key] = entry
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return entry

    def age(self, entry: CacheEntry) -> float:
        return self._clock() - entry.fetched_at

    def is_fresh(self, entry: CacheEntry, stale_after: float) -> bool:
        return self.age(entry) < stale_after

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
