"""Cache store adapters.

The order limiter keeps its interval count in a single named cache entry.
It depends on the abstract store only, so the in-memory implementation can
be replaced by a shared backend (e.g., Redis) without touching the service.
"""

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.cache.in_memory import InMemoryTTLCache

__all__ = ["AbstractCacheStore", "InMemoryTTLCache"]
