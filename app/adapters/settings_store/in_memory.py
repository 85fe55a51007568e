"""In-memory configuration store seeded from environment settings."""

from __future__ import annotations

import copy
import threading
from typing import Any, Mapping

from app.adapters.settings_store.base import (
    LIMITER_OPTION_KEY,
    TIMEZONE_KEY,
    WEEK_STARTS_ON_KEY,
    AbstractSettingsStore,
)
from app.core.config import LimiterSettings


class InMemorySettingsStore(AbstractSettingsStore):
    """Thread-safe option store backed by a dict.

    Values are deep-copied on the way in and out so callers can't mutate
    stored settings through a returned mapping.
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.RLock()
        self._options: dict[str, Any] = copy.deepcopy(dict(options or {}))

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._options:
                return default
            return copy.deepcopy(self._options[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._options[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._options.pop(key, None)


def build_settings_store(limiter_settings: LimiterSettings) -> InMemorySettingsStore:
    """Create a settings store populated from ``LIMIT_ORDERS_*`` settings.

    Args:
        limiter_settings: Resolved limiter settings.

    Returns:
        InMemorySettingsStore holding the limiter option bag and the site-wide
        week start and timezone options.
    """

    bag: dict[str, Any] = {
        "enabled": limiter_settings.enabled,
        "interval": limiter_settings.interval,
    }
    if limiter_settings.limit is not None:
        bag["limit"] = limiter_settings.limit

    options: dict[str, Any] = {
        LIMITER_OPTION_KEY: bag,
        WEEK_STARTS_ON_KEY: limiter_settings.week_starts_on,
    }
    if limiter_settings.timezone:
        options[TIMEZONE_KEY] = limiter_settings.timezone

    return InMemorySettingsStore(options)
