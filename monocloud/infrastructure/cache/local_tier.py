"""In-process cache tier: keyed store of CacheEntry objects.

Always available and lost on restart. Expired entries are removed lazily
by the read that discovers them; there is no background sweep. With
max_entries set, the least recently used entry is evicted on overflow.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from monocloud.infrastructure.cache.entry import CacheEntry

Clock = Callable[[], float]


class LocalTier:
    """Synchronous key -> CacheEntry store. Keys are used as given (no namespace)."""

    def __init__(self, clock: Clock = time.time, max_entries: int | None = None) -> None:
        """Initialize the local tier.

        Args:
            clock: Returns the current time in epoch seconds (injectable for tests).
            max_entries: Optional LRU bound; None keeps the tier unbounded.
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got: {max_entries}")
        self._clock = clock
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_live(self._clock()):
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if absent or expired."""
        entry = self._live_entry(key)
        if entry is None:
            return None
        if self._max_entries is not None:
            self._entries.move_to_end(key)
        return entry.data

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the live entry (with timestamps), or None."""
        return self._live_entry(key)

    def set(self, key: str, value: Any, ttl_seconds: float) -> CacheEntry:
        """Store value under key for ttl_seconds, replacing any previous entry."""
        entry = CacheEntry.create(value, self._clock(), ttl_seconds)
        self._entries.pop(key, None)
        self._entries[key] = entry
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return entry

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if an entry (live or expired) was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        """Number of stored entries, including expired ones not yet discovered."""
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)
