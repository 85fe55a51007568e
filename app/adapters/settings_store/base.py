"""Configuration store interface.

The order limiter does not own its configuration; it reads option values
from whatever store the host provides.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

# Option holding the limiter's own settings bag (enabled, limit, interval)
LIMITER_OPTION_KEY = "limit_orders"

# Site-wide options consumed, but not owned, by the limiter
WEEK_STARTS_ON_KEY = "week_starts_on"
TIMEZONE_KEY = "timezone_string"


class AbstractSettingsStore(ABC):
    """Interface for option stores (key -> value)."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key`` or ``default`` when unset.

        Raises:
            SettingsStoreAppError: If the backing store cannot be read.
        """
        raise NotImplementedError
