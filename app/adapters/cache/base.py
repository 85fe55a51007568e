"""Cache store interface.

Services depend on this abstraction (not the concrete implementation) so the
storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractCacheStore(ABC):
    """Interface for named, TTL-bounded cache entries.

    Implementations may evict entries at any time (e.g., memory pressure) but
    must never return a value once its TTL has elapsed. Backend failures are
    reported as ``CacheStoreAppError``.
    """

    @abstractmethod
    def get(self, name: str) -> Any | None:
        """Return the cached value, or None on a miss (absent or expired)."""
        raise NotImplementedError

    @abstractmethod
    def set(self, name: str, value: Any, ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``.

        Args:
            name: Entry name.
            value: Value to store. ``None`` cannot be stored (it means miss).
            ttl_seconds: Lifetime in whole seconds. Values <= 0 produce an
                entry that is already expired.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove an entry if present."""
        raise NotImplementedError
