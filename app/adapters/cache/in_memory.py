"""In-memory TTL cache.

Notes:
- Per-process only: each worker holds its own entries, which is safe for the
  order count because every miss recomputes from the order store.
- Thread-safe: uses a lock around shared state.
- Expiry is computed in whole seconds (``int(now) + ttl``) so that an entry
  written with "seconds until the next interval" expires exactly at the
  interval boundary.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from app.adapters.cache.base import AbstractCacheStore

logger = logging.getLogger(__name__)


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: Any
    expires_at: int


class InMemoryTTLCache(AbstractCacheStore):
    """Thread-safe, in-memory TTL cache with LRU eviction.

    Attributes:
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        *,
        max_entries: int | None = 1024,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            max_entries: Maximum number of entries kept (None for unlimited).
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If max_entries is not positive.
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLCache(max_entries={self._max_entries}, size={len(self._store)}, "
            f"hits={self._hits}, misses={self._misses}, evictions={self._evictions})"
        )

    def get(self, name: str) -> Any | None:
        with self._lock:
            item = self._store.get(name)
            if item is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_name": name, "reason": "not_found"})
                return None

            if self._is_expired(item):
                self._evict_single(name)
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_name": name, "reason": "expired"})
                return None

            self._hits += 1
            self._store.move_to_end(name)
            logger.debug("cache.hit", extra={"cache_name": name})
            return item.value

    def set(self, name: str, value: Any, ttl_seconds: int) -> None:
        if not name:
            raise ValueError("name must be a non-empty string")
        if value is None:
            raise ValueError("None cannot be cached; it is reserved for misses")

        with self._lock:
            self._evict_expired_locked()
            expires_at = int(self._clock()) + int(ttl_seconds)
            self._store[name] = CacheItem(value=value, expires_at=expires_at)
            self._store.move_to_end(name)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={
                    "cache_name": name,
                    "size": len(self._store),
                    "ttl_s": int(ttl_seconds),
                    "expires_at": expires_at,
                },
            )

    def delete(self, name: str) -> None:
        with self._lock:
            self._store.pop(name, None)

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, name: str) -> None:
        if self._store.pop(name, None) is not None:
            self._evictions += 1

    def _evict_expired_locked(self) -> None:
        expired = [k for k, item in self._store.items() if self._is_expired(item)]
        for name in expired:
            self._evict_single(name)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    def _is_expired(self, item: CacheItem) -> bool:
        return self._clock() >= item.expires_at
