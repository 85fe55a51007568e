"""Interval boundary arithmetic for order limiting.

Intervals are calendar based, not duration based: every interval starts at
local midnight in the store's timezone and the next one starts one calendar
day, week or month later. Across a DST change an interval is therefore 23 or
25 hours long, which is expected.

Hosts can override both boundaries through optional filter callables. The
filters receive the computed value plus context and their return value is
used as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Any, Callable

from dateutil.relativedelta import relativedelta

from app.core.errors import ValidationAppError


class Interval(str, Enum):
    """Supported limiting intervals."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Any) -> "Interval":
        """Resolve a configured value, falling back to DAILY when unrecognized."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.DAILY


# (start, interval) -> start
IntervalStartFilter = Callable[[datetime, Interval], datetime]
# (next_start, current_start, interval) -> next_start
NextIntervalFilter = Callable[[datetime, datetime, Interval], datetime]

_INTERVAL_STEP: dict[Interval, timedelta | relativedelta] = {
    Interval.DAILY: timedelta(days=1),
    Interval.WEEKLY: timedelta(days=7),
    Interval.MONTHLY: relativedelta(months=1),
}


@dataclass(frozen=True)
class IntervalWindow:
    """The current interval: ``start <= now < end`` unless a filter says otherwise."""

    interval: Interval
    start: datetime
    end: datetime


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValidationAppError(
            code="naive_datetime",
            message="Interval calculations require a timezone-aware datetime",
        )


def sunday_based_weekday(day: datetime) -> int:
    """Return the weekday with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def get_interval_start(
    now: datetime,
    *,
    interval: Interval,
    week_start_day: int = 0,
    tz: tzinfo | None = None,
    start_filter: IntervalStartFilter | None = None,
) -> datetime:
    """Compute the start of the interval containing ``now``.

    Args:
        now: Current instant (timezone-aware).
        interval: Limiting interval.
        week_start_day: First day of the week, 0=Sunday .. 6=Saturday.
        tz: Store timezone; defaults to the timezone of ``now``.
        start_filter: Optional override applied to the computed start.

    Returns:
        Local midnight that begins the current interval (or the filter's value).

    Raises:
        ValidationAppError: If ``now`` is naive.
    """
    _require_aware(now)
    local_now = now.astimezone(tz) if tz is not None else now
    day = local_now.date()

    if interval is Interval.WEEKLY:
        # Today if it is the week start day, otherwise the most recent one.
        days_back = (sunday_based_weekday(local_now) - week_start_day) % 7
        day -= timedelta(days=days_back)
    elif interval is Interval.MONTHLY:
        day = day.replace(day=1)

    start = datetime.combine(day, time.min, tzinfo=local_now.tzinfo)

    if start_filter is not None:
        start = start_filter(start, interval)
    return start


def get_next_interval_start(
    current_start: datetime,
    *,
    interval: Interval,
    next_filter: NextIntervalFilter | None = None,
) -> datetime:
    """Advance ``current_start`` by one calendar unit of ``interval``.

    Months follow dateutil's rules, so the 31st advances to the last day of
    a shorter month.
    """
    next_start = current_start + _INTERVAL_STEP[interval]

    if next_filter is not None:
        next_start = next_filter(next_start, current_start, interval)
    return next_start


def get_interval_window(
    now: datetime,
    *,
    interval: Interval,
    week_start_day: int = 0,
    tz: tzinfo | None = None,
    start_filter: IntervalStartFilter | None = None,
    next_filter: NextIntervalFilter | None = None,
) -> IntervalWindow:
    """Compute both boundaries of the interval containing ``now``."""
    start = get_interval_start(
        now,
        interval=interval,
        week_start_day=week_start_day,
        tz=tz,
        start_filter=start_filter,
    )
    end = get_next_interval_start(start, interval=interval, next_filter=next_filter)
    return IntervalWindow(interval=interval, start=start, end=end)


def get_seconds_until_next_interval(
    now: datetime,
    *,
    interval: Interval,
    week_start_day: int = 0,
    tz: tzinfo | None = None,
    start_filter: IntervalStartFilter | None = None,
    next_filter: NextIntervalFilter | None = None,
) -> int:
    """Whole seconds from ``now`` until the next interval begins, never negative."""
    window = get_interval_window(
        now,
        interval=interval,
        week_start_day=week_start_day,
        tz=tz,
        start_filter=start_filter,
        next_filter=next_filter,
    )
    return max(int(window.end.timestamp()) - int(now.timestamp()), 0)
