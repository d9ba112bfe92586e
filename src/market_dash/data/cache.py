"""In-memory TTL cache for historical bars and news feeds."""

import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

HISTORICAL_CACHE_TTL = float(os.environ.get("HISTORICAL_CACHE_TTL", "300"))  # 5 minutes
NEWS_CACHE_TTL = float(os.environ.get("NEWS_CACHE_TTL", "300"))


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its absolute expiry (clock seconds)."""

    expires_at: float
    data: Any


class TTLCache:
    """
    Dict-backed cache whose entries expire a fixed time after they are stored.

    An entry is served only while now < expires_at. Expired entries are
    treated as absent, deleted when read, and swept from the whole cache on
    every store.
    """

    def __init__(
        self,
        ttl: float = HISTORICAL_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """
        Get cached data by key.

        Args:
            key: Cache key

        Returns:
            Cached data or None if missing or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.data

    def store(self, key: str, data: Any, ttl: float | None = None) -> None:
        """
        Store data under key with a fresh expiry.

        Expired entries under other keys are dropped first. A non-positive
        TTL stores nothing.
        """
        now = self._clock()
        self.sweep(now)
        expire = ttl if ttl is not None else self.ttl
        if expire <= 0:
            return
        self._entries[key] = CacheEntry(expires_at=now + expire, data=data)

    def sweep(self, now: float | None = None) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed
        """
        if now is None:
            now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def exists(self, key: str) -> bool:
        """Check if key holds a live entry."""
        return self.get(key) is not None

    def clear(self) -> None:
        """Clear all cached data."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
