"""Reporting window resolution for the dashboard.

A request names a period (today, week, month or a custom date range). The
period is laid out on local calendar days in a fixed civil offset from UTC
and converted to a closed interval of UTC instants, the *current* window.
The *previous* window has exactly the same duration and ends one
millisecond before the current window starts:

    previous.end   = current.start - 1 ms
    previous.start = previous.end - (current.end - current.start)

The civil offset is fixed (default UTC-6), so daylight saving transitions
are not modelled. "Now" and the offset are always passed in; nothing in
this module reads the clock.
"""

import calendar
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, timezone
from enum import Enum

# Gap between the end of the previous window and the start of the current one.
BOUNDARY_GAP = timedelta(milliseconds=1)

# Last representable instant of a local day at millisecond precision.
END_OF_DAY = time(23, 59, 59, 999000)

DATE_FORMAT = "%Y-%m-%d"


class PeriodKind(str, Enum):
    """Named reporting periods accepted by the dashboard."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PeriodWindow:
    """Closed interval ``[start, end]`` of UTC instants.

    Attributes:
        start: First instant included in the window.
        end: Last instant included in the window.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("Window bounds must be timezone-aware")
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} precedes start {self.start}")

    @property
    def duration(self) -> timedelta:
        """Distance between the first and last included instant."""
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant falls inside the window (bounds included)."""
        return self.start <= instant <= self.end

    def preceding(self) -> "PeriodWindow":
        """Window of equal duration ending one gap before this one starts."""
        end = self.start - BOUNDARY_GAP
        return PeriodWindow(start=end - self.duration, end=end)


@dataclass(frozen=True)
class ComparisonWindows:
    """Current window and the previous window it is compared against."""

    period: PeriodKind
    current: PeriodWindow
    previous: PeriodWindow


def fixed_offset(minutes: int) -> timezone:
    """Build a fixed-offset tzinfo from minutes east of UTC."""
    return timezone(timedelta(minutes=minutes))


def local_date(instant: datetime, tz: timezone) -> date:
    """Calendar date of an instant in the given civil offset."""
    return instant.astimezone(tz).date()


def local_days_window(first_day: date, last_day: date, tz: timezone) -> PeriodWindow:
    """Window spanning whole local days, from first_day 00:00 to last_day 23:59:59.999.

    Args:
        first_day: First local day included.
        last_day: Last local day included.
        tz: Civil offset the days are laid out in.

    Returns:
        Window with UTC bounds.
    """
    start = datetime.combine(first_day, time.min, tzinfo=tz)
    end = datetime.combine(last_day, END_OF_DAY, tzinfo=tz)
    return PeriodWindow(start=start.astimezone(UTC), end=end.astimezone(UTC))


def parse_period(value: str | None) -> PeriodKind:
    """Parse the ``period`` query value; a missing value means the current month.

    Raises:
        ValueError: If the value is not a known period.
    """
    if value is None or value == "":
        return PeriodKind.MONTH
    try:
        return PeriodKind(value.lower())
    except ValueError:
        allowed = ", ".join(kind.value for kind in PeriodKind)
        raise ValueError(f"Invalid period '{value}'. Expected one of: {allowed}") from None


def parse_local_date(value: str, field: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date.

    Args:
        value: Raw query value.
        field: Parameter name used in the error message.

    Raises:
        ValueError: If the value is not a valid date.
    """
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid {field} '{value}'. Use YYYY-MM-DD") from None


def _current_window(
    period: PeriodKind,
    today: date,
    start_date: str | None,
    end_date: str | None,
    tz: timezone,
    max_range_days: int,
) -> PeriodWindow:
    if period is PeriodKind.TODAY:
        return local_days_window(today, today, tz)

    if period is PeriodKind.WEEK:
        return local_days_window(today - timedelta(days=6), today, tz)

    if period is PeriodKind.MONTH:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return local_days_window(today.replace(day=1), today.replace(day=last_day), tz)

    if not start_date:
        raise ValueError("startDate is required when period is custom")
    if not end_date:
        raise ValueError("endDate is required when period is custom")

    first_day = parse_local_date(start_date, "startDate")
    last_day = parse_local_date(end_date, "endDate")

    if last_day < first_day:
        raise ValueError("endDate must be on or after startDate")
    span_days = (last_day - first_day).days + 1
    if span_days > max_range_days:
        raise ValueError(
            f"Date range of {span_days} days exceeds the maximum of {max_range_days} days"
        )

    return local_days_window(first_day, last_day, tz)


def resolve_windows(
    period: PeriodKind,
    now: datetime,
    tz: timezone,
    start_date: str | None = None,
    end_date: str | None = None,
    max_range_days: int = 730,
) -> ComparisonWindows:
    """Resolve a period request into current and previous windows.

    Args:
        period: Requested period.
        now: Current instant (timezone-aware).
        tz: Civil offset used for calendar boundaries.
        start_date: First local day for custom periods (YYYY-MM-DD).
        end_date: Last local day for custom periods (YYYY-MM-DD).
        max_range_days: Longest custom range accepted, in days.

    Returns:
        Comparable current and previous windows.

    Raises:
        ValueError: If custom dates are missing, malformed, inverted, too far
            apart, or so close to the calendar limits that the current or
            previous window cannot be represented.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    today = local_date(now, tz)
    try:
        current = _current_window(period, today, start_date, end_date, tz, max_range_days)
        previous = current.preceding()
    except OverflowError:
        raise ValueError("Date range is outside the supported calendar") from None
    return ComparisonWindows(period=period, current=current, previous=previous)


def trailing_days(now: datetime, tz: timezone, days: int) -> list[date]:
    """The ``days`` local calendar days ending today, oldest first."""
    today = local_date(now, tz)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
