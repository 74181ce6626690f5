"""
Window - Resolve a dashboard period into a concrete time window.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class Period(str, Enum):
    """Coarse time-window selector requested by the dashboard."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


PERIOD_LABELS = {
    Period.TODAY: "today",
    Period.WEEK: "this week",
    Period.MONTH: "this month",
}


@dataclass(frozen=True)
class TimeWindow:
    """Resolved window. `end` is only set for the `today` period."""
    period: Period
    start: datetime
    end: datetime | None = None

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self.period]


def normalize_period(value: str | None) -> Period:
    """Map a raw query value onto a Period, falling back to week."""
    try:
        return Period(value)
    except ValueError:
        return Period.WEEK


def resolve_window(period: Period | str | None, now: datetime) -> TimeWindow:
    """
    Resolve a period into a window relative to `now`.

    Args:
        period: Period keyword (unknown values are treated as week)
        now: Current instant, aware, in the reference timezone

    Returns:
        TimeWindow with a start and, for `today`, an end
    """
    period = normalize_period(period)

    if period is Period.TODAY:
        # Business-hours approximation: 01:00 to 23:00 local
        start = now.replace(hour=1, minute=0, second=0, microsecond=0)
        end = now.replace(hour=23, minute=0, second=0, microsecond=0)
        return TimeWindow(period, start, end)

    if period is Period.MONTH:
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return TimeWindow(period, start)

    return TimeWindow(period, now - timedelta(days=7))


def in_window(instant: datetime, window: TimeWindow) -> bool:
    """Check whether `instant` falls inside `window` (both bounds inclusive)."""
    local = instant.astimezone(window.start.tzinfo)
    if local < window.start:
        return False
    if window.end is not None and local > window.end:
        return False
    return True
