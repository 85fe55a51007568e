"""Configuration snapshot for the order limiter.

The limiter's settings are read from the configuration store once per
decision lifecycle (typically one HTTP request) and frozen into a
``LimiterConfig``. Callers that need fresher values load a new snapshot.

Reading configuration never fails: an unavailable store behaves like an
empty one, and malformed values fall back to permissive defaults
(unlimited, daily, Sunday, default timezone).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import tzinfo
from types import MappingProxyType
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.adapters.settings_store.base import (
    LIMITER_OPTION_KEY,
    TIMEZONE_KEY,
    WEEK_STARTS_ON_KEY,
    AbstractSettingsStore,
)
from app.core.config import settings as app_settings
from app.core.errors import SettingsStoreAppError
from app.services.intervals import Interval

logger = logging.getLogger(__name__)

UNLIMITED = -1

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def coerce_limit(value: Any) -> int:
    """Convert a configured limit into an order count, or -1 for unlimited.

    Numbers and numeric strings >= 0 are accepted (fractions truncate).
    Booleans, non-finite numbers and anything else mean unlimited.
    """
    if isinstance(value, bool) or value is None:
        return UNLIMITED
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return UNLIMITED
    else:
        return UNLIMITED

    if not math.isfinite(number) or number < 0:
        return UNLIMITED
    return int(number)


def _coerce_week_start(value: Any) -> int:
    if value is None:
        return 0
    try:
        day = int(value)
    except (TypeError, ValueError):
        day = -1
    if isinstance(value, bool) or not 0 <= day <= 6:
        logger.warning(
            "limiter_config.invalid_week_start",
            extra={"week_starts_on": repr(value)},
        )
        return 0
    return day


def _resolve_timezone(name: Any, fallback: str) -> tzinfo:
    if isinstance(name, str) and name.strip():
        try:
            return ZoneInfo(name.strip())
        except (ZoneInfoNotFoundError, ValueError, OSError):
            # Directory names such as "America" raise IsADirectoryError
            logger.warning(
                "limiter_config.unknown_timezone",
                extra={"timezone": name, "fallback": fallback},
            )
    return ZoneInfo(fallback)


@dataclass(frozen=True)
class LimiterConfig:
    """Immutable view of the limiter settings for one decision lifecycle.

    Attributes:
        options: Raw limiter option bag (enabled, limit, interval).
        week_start_day: Site-wide first day of the week, 0=Sunday .. 6=Saturday.
        timezone: Store timezone used for interval boundaries.
    """

    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    week_start_day: int = 0
    timezone: tzinfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def get_setting(self, key: str) -> Any | None:
        """Return the raw value of a limiter setting, or None when unset."""
        return self.options.get(key)

    @property
    def enabled(self) -> bool:
        return _is_truthy(self.get_setting("enabled"))

    @property
    def limit(self) -> int:
        """Configured limit regardless of the enabled flag (-1 if unusable)."""
        return coerce_limit(self.get_setting("limit"))

    @property
    def interval_setting(self) -> Any | None:
        return self.get_setting("interval")

    @property
    def interval(self) -> Interval:
        return Interval.parse(self.interval_setting)


def load_limiter_config(
    store: AbstractSettingsStore,
    *,
    default_timezone: str | None = None,
) -> LimiterConfig:
    """Read the limiter settings from ``store`` once.

    Args:
        store: Configuration store to read.
        default_timezone: Timezone used when the store has none (defaults to
            ``LIMIT_ORDERS_DEFAULT_TIMEZONE``).

    Returns:
        A frozen LimiterConfig. If the store is unavailable the snapshot is
        empty, which leaves limiting disabled.
    """
    fallback_tz = default_timezone or app_settings.limiter.default_timezone

    try:
        bag = store.get(LIMITER_OPTION_KEY, {})
        week_starts_on = store.get(WEEK_STARTS_ON_KEY, 0)
        timezone_name = store.get(TIMEZONE_KEY)
    except SettingsStoreAppError as exc:
        logger.warning(
            "limiter_config.unavailable",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        return LimiterConfig(timezone=_resolve_timezone(None, fallback_tz))
    except Exception as exc:
        logger.warning(
            "limiter_config.unavailable",
            extra={"error_type": type(exc).__name__},
        )
        return LimiterConfig(timezone=_resolve_timezone(None, fallback_tz))

    if not isinstance(bag, Mapping):
        logger.warning(
            "limiter_config.invalid_options",
            extra={"option_type": type(bag).__name__},
        )
        bag = {}

    return LimiterConfig(
        options=MappingProxyType(dict(bag)),
        week_start_day=_coerce_week_start(week_starts_on),
        timezone=_resolve_timezone(timezone_name, fallback_tz),
    )
