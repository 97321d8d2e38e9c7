"""
In-process definition cache (L1).

A bounded LRU map with per-entry TTL. Purely a fast path in front of the
persistent store: dropping it loses nothing.
"""
import threading
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from vocabstudy.models.dictionary import CacheEntry, WordEntry


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryCache:
    """Thread-safe LRU cache with TTL eviction"""

    def __init__(
        self,
        max_entries: int,
        ttl: timedelta,
        clock: Callable[[], datetime] = utc_now
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl = ttl
        self.clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, term: str) -> Optional[WordEntry]:
        """Return a fresh entry, evicting it if it has expired."""
        with self._lock:
            cached = self._entries.get(term)
            if cached is None:
                return None
            if not cached.is_fresh(self.ttl, self.clock()):
                del self._entries[term]
                return None
            self._entries.move_to_end(term)
            return cached.entry

    def set(self, term: str, entry: WordEntry, cached_at: Optional[datetime] = None) -> None:
        """Insert or replace an entry, evicting the least recently used one when full."""
        with self._lock:
            self._entries[term] = CacheEntry(
                term=term,
                entry=entry,
                cached_at=cached_at or self.clock()
            )
            self._entries.move_to_end(term)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def delete(self, term: str) -> bool:
        with self._lock:
            return self._entries.pop(term, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were dropped."""
        now = self.clock()
        with self._lock:
            expired = [t for t, c in self._entries.items() if not c.is_fresh(self.ttl, now)]
            for term in expired:
                del self._entries[term]
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, term: str) -> bool:
        return self.get(term) is not None
