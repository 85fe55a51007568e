"""Order limiter dependency for FastAPI routes.

This module wires the store adapters into the HTTP layer.

Design goals:
- Process-wide stores: the cache, order store and settings store live for
  the whole process so the cached count survives across requests.
- Per-request configuration: every request gets a new OrderLimiter built on
  a freshly loaded settings snapshot, so settings changes apply on the next
  request without a restart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.cache.in_memory import InMemoryTTLCache
from app.adapters.orders.base import AbstractOrderStore
from app.adapters.orders.in_memory import InMemoryOrderStore
from app.adapters.settings_store.base import AbstractSettingsStore
from app.adapters.settings_store.in_memory import build_settings_store
from app.core.config import settings
from app.services.limiter_config import load_limiter_config
from app.services.order_limiter import OrderLimiter

logger = logging.getLogger(__name__)


@dataclass
class LimiterStores:
    """Process-wide collaborators shared by every OrderLimiter."""

    settings_store: AbstractSettingsStore
    cache: AbstractCacheStore
    orders: AbstractOrderStore


_stores: LimiterStores | None = None


def parse_order_types(types_string: str | None) -> frozenset[str]:
    """Parse a comma-separated list of order types.

    Examples:
        >>> sorted(parse_order_types("shop_order, subscription"))
        ['shop_order', 'subscription']
        >>> parse_order_types("")
        frozenset()
    """
    if not types_string:
        return frozenset()
    return frozenset(t.strip() for t in types_string.split(",") if t.strip())


def build_default_stores() -> LimiterStores:
    """Build in-memory stores from ``LIMIT_ORDERS_*`` settings."""

    limiter_settings = settings.limiter
    count_types = parse_order_types(limiter_settings.order_count_types)

    logger.info(
        "order_limiter.stores_initialized",
        extra={
            "backend": "in_memory",
            "order_count_types": sorted(count_types),
            "cache_max_entries": limiter_settings.cache_max_entries,
        },
    )

    return LimiterStores(
        settings_store=build_settings_store(limiter_settings),
        cache=InMemoryTTLCache(max_entries=limiter_settings.cache_max_entries),
        orders=InMemoryOrderStore(count_types=count_types),
    )


def get_limiter_stores() -> LimiterStores:
    """Return the process-wide stores, building them on first use."""

    global _stores

    if _stores is None:
        _stores = build_default_stores()
    return _stores


def set_limiter_stores(stores: LimiterStores | None) -> None:
    """Replace the process-wide stores (hosts with their own backends, tests)."""

    global _stores
    _stores = stores


def get_order_limiter() -> OrderLimiter:
    """FastAPI dependency returning a limiter for the current request.

    Returns:
        OrderLimiter bound to a settings snapshot loaded for this request.
    """

    stores = get_limiter_stores()
    config = load_limiter_config(stores.settings_store)
    return OrderLimiter(config, cache=stores.cache, orders=stores.orders)
