"""Order limiting decisions for the current interval.

The limiter answers how many orders the store may still accept before the
current interval resets. The number of qualifying orders is kept in a single
cache entry whose TTL ends exactly at the next interval boundary, so the
entry disappears when the interval rolls over.

Whenever the entry is missing the count is recomputed from the order store
rather than incremented. Concurrent misses may each query the store, but
they all write the same ground-truth value, so the count never drifts.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.orders.base import AbstractOrderStore
from app.core.errors import CacheStoreAppError, CountingAppError
from app.services.intervals import (
    IntervalStartFilter,
    IntervalWindow,
    NextIntervalFilter,
    get_interval_window,
)
from app.services.limiter_config import UNLIMITED, LimiterConfig

logger = logging.getLogger(__name__)

# Cache entry holding the number of qualifying orders in the current interval
TRANSIENT_NAME = "limit_orders_order_count"


@dataclass(frozen=True)
class LimitStatus:
    """Limit figures taken from one reading of the clock.

    Attributes:
        enabled: Whether limiting is enabled.
        limit: Orders permitted per interval, or -1 for no limit.
        remaining: Orders still accepted, or -1 for no limit.
        order_count: Qualifying orders in the interval, None when not counted.
        window: Current interval boundaries.
        seconds_until_next_interval: Whole seconds until the window ends.
    """

    enabled: bool
    limit: int
    remaining: int
    order_count: int | None
    window: IntervalWindow
    seconds_until_next_interval: int

    @property
    def has_reached_limit(self) -> bool:
        return self.remaining == 0


class OrderLimiter:
    """Decide whether a store has reached its order limit.

    Attributes:
        config: Settings snapshot for this decision lifecycle.
        cache: Cache store holding the interval order count.
        orders: Order store used as the source of truth.
    """

    def __init__(
        self,
        config: LimiterConfig,
        *,
        cache: AbstractCacheStore,
        orders: AbstractOrderStore,
        clock: Callable[[], float] = time.time,
        start_filter: IntervalStartFilter | None = None,
        next_filter: NextIntervalFilter | None = None,
    ) -> None:
        """Initialize the limiter.

        Args:
            config: Settings snapshot loaded via ``load_limiter_config``.
            cache: Cache store for the interval count.
            orders: Order store to count qualifying orders.
            clock: Time source returning UNIX time in seconds.
            start_filter: Optional override for the interval start.
            next_filter: Optional override for the next interval start.
        """
        self.config = config
        self.cache = cache
        self.orders = orders
        self._clock = clock
        self._start_filter = start_filter
        self._next_filter = next_filter

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).astimezone(
            self.config.timezone
        )

    def _window(self, now: datetime) -> IntervalWindow:
        return get_interval_window(
            now,
            interval=self.config.interval,
            week_start_day=self.config.week_start_day,
            tz=self.config.timezone,
            start_filter=self._start_filter,
            next_filter=self._next_filter,
        )

    def _seconds_until(self, now: datetime, window: IntervalWindow) -> int:
        return max(int(window.end.timestamp()) - int(now.timestamp()), 0)

    def is_enabled(self) -> bool:
        """Is limiting currently enabled for this store?"""
        return self.config.enabled

    def get_limit(self) -> int:
        """Return the number of orders permitted per interval, or -1 for no limit."""
        if not self.is_enabled():
            return UNLIMITED
        return self.config.limit

    def get_status(self, *, regenerate: bool = False) -> LimitStatus:
        """Return every limit figure computed against a single clock reading.

        Args:
            regenerate: Recount qualifying orders even when a cached count
                exists, refreshing the cache entry.

        Raises:
            CountingAppError: If the count had to be regenerated and the order
                store failed.
        """
        now = self._now()
        window = self._window(now)
        limit = self.get_limit()

        count: int | None = None
        if regenerate:
            count = self._regenerate(now, window)
        elif limit != UNLIMITED:
            count = self._get_cached_count()
            if count is None:
                count = self._regenerate(now, window)

        if limit == UNLIMITED or count is None:
            remaining = UNLIMITED
        else:
            remaining = max(limit - count, 0)

        return LimitStatus(
            enabled=self.is_enabled(),
            limit=limit,
            remaining=remaining,
            order_count=count,
            window=window,
            seconds_until_next_interval=self._seconds_until(now, window),
        )

    def get_remaining_orders(self) -> int:
        """Return how many orders may still be accepted, or -1 for no limit.

        Never returns less than zero, even if more orders exist than the
        current limit allows (e.g., the limit was lowered mid-interval).

        Raises:
            CountingAppError: If the count had to be regenerated and the order
                store failed.
        """
        return self.get_status().remaining

    def has_reached_limit(self) -> bool:
        """True when no further orders may be accepted in this interval."""
        return self.get_remaining_orders() == 0

    def get_interval_start(self) -> datetime:
        """Return the start of the current interval in the store timezone."""
        return self._window(self._now()).start

    def get_next_interval_start(self) -> datetime:
        """Return the instant at which the next interval begins."""
        return self._window(self._now()).end

    def get_seconds_until_next_interval(self) -> int:
        """Return whole seconds until the limiting interval resets (>= 0)."""
        now = self._now()
        return self._seconds_until(now, self._window(now))

    def regenerate_transient(self) -> int:
        """Recount qualifying orders and rewrite the cached count.

        The TTL is the time left until the next interval at the moment of
        writing, so the entry expires exactly when the interval rolls over.

        Returns:
            The number of qualifying orders in the current interval.

        Raises:
            CountingAppError: If the order store query fails.
        """
        now = self._now()
        return self._regenerate(now, self._window(now))

    def _regenerate(self, now: datetime, window: IntervalWindow) -> int:
        count = self.count_qualifying_orders(window.start)
        ttl = self._seconds_until(now, window)

        try:
            self.cache.set(TRANSIENT_NAME, count, ttl)
        except CacheStoreAppError as exc:
            logger.warning(
                "order_limiter.cache_write_failed",
                extra={"cache_name": TRANSIENT_NAME, "error_code": exc.code},
            )
        except Exception as exc:
            logger.warning(
                "order_limiter.cache_write_failed",
                extra={"cache_name": TRANSIENT_NAME, "error_type": type(exc).__name__},
            )

        logger.info(
            "order_limiter.regenerated",
            extra={
                "count": count,
                "ttl_s": ttl,
                "interval": window.interval.value,
                "interval_start": window.start.isoformat(),
            },
        )
        return count

    def count_qualifying_orders(self, interval_start: datetime | None = None) -> int:
        """Count qualifying orders created at or after ``interval_start``.

        Always queries the order store; the cached count is neither read nor
        written.

        Args:
            interval_start: Lower bound of the count. Defaults to the start
                of the current interval.

        Raises:
            CountingAppError: If the order store query fails.
        """
        if interval_start is None:
            interval_start = self.get_interval_start()

        try:
            count = self.orders.count(
                types=self.orders.order_count_types(),
                created_after=interval_start,
            )
        except CountingAppError:
            logger.error(
                "order_limiter.count_failed",
                extra={"interval_start": interval_start.isoformat()},
            )
            raise
        except Exception as exc:
            logger.error(
                "order_limiter.count_failed",
                extra={
                    "interval_start": interval_start.isoformat(),
                    "error_type": type(exc).__name__,
                },
            )
            raise CountingAppError(
                code="order_count_failed",
                message="Unable to count qualifying orders",
                details={
                    "interval_start": interval_start.isoformat(),
                    "error_type": type(exc).__name__,
                },
            ) from exc

        return int(count)

    def _get_cached_count(self) -> int | None:
        try:
            cached: Any = self.cache.get(TRANSIENT_NAME)
        except CacheStoreAppError as exc:
            logger.warning(
                "order_limiter.cache_unavailable",
                extra={"cache_name": TRANSIENT_NAME, "error_code": exc.code},
            )
            return None
        except Exception as exc:
            logger.warning(
                "order_limiter.cache_unavailable",
                extra={"cache_name": TRANSIENT_NAME, "error_type": type(exc).__name__},
            )
            return None

        if isinstance(cached, bool) or not isinstance(cached, int) or cached < 0:
            logger.debug(
                "order_limiter.cache_miss",
                extra={"cache_name": TRANSIENT_NAME, "cached_type": type(cached).__name__},
            )
            return None

        logger.debug("order_limiter.cache_hit", extra={"cache_name": TRANSIENT_NAME, "count": cached})
        return cached
