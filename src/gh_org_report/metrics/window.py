"""Trailing report window shared by every aggregator.

A window is anchored on a single frozen ``as_of`` instant so that the calendar,
the weekly series and the rankings of one run all agree on which events fall
inside it.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

DEFAULT_WINDOW_DAYS = 365


def to_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime; naive values are taken to be UTC."""
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def utc_day(dt: datetime) -> date:
    """UTC calendar day of a timestamp."""
    return to_utc(dt).date()


def week_start(d: date) -> date:
    """Get the Monday of the week containing d.

    Uses the Sunday=0 weekday convention: a Sunday shifts back 6 days, any
    other day shifts back ``weekday - 1`` days (Monday=1 ... Saturday=6).

    Args:
        d: Input date.

    Returns:
        Start date of the week (Monday).
    """
    weekday = d.isoweekday() % 7
    days_back = 6 if weekday == 0 else weekday - 1
    return d - timedelta(days=days_back)


@dataclass(frozen=True)
class ReportWindow:
    """Trailing window of ``days`` days ending on the UTC day of ``as_of``.

    Both endpoints are inclusive, so a 365-day window spans 366 calendar days.

    Attributes:
        as_of: Reference instant (stored in UTC).
        days: Length of the trailing window in days.
    """

    as_of: datetime
    days: int = DEFAULT_WINDOW_DAYS

    def __post_init__(self) -> None:
        if self.days < 1:
            msg = f"Window must span at least one day, got {self.days}"
            raise ValueError(msg)
        object.__setattr__(self, "as_of", to_utc(self.as_of))

    @property
    def today(self) -> date:
        """Last day of the window."""
        return self.as_of.date()

    @property
    def start(self) -> date:
        """First day of the window."""
        return self.today - timedelta(days=self.days)

    @property
    def since(self) -> datetime:
        """Window start as a UTC midnight timestamp, for API ``since`` filters."""
        return datetime(self.start.year, self.start.month, self.start.day, tzinfo=UTC)

    def contains(self, day: date) -> bool:
        """Check whether a calendar day falls inside the window."""
        return self.start <= day <= self.today

    def contains_instant(self, dt: datetime) -> bool:
        """Check whether a timestamp's UTC day falls inside the window."""
        return self.contains(utc_day(dt))

    def iter_days(self) -> Iterator[date]:
        """Yield every day of the window in ascending order."""
        current = self.start
        while current <= self.today:
            yield current
            current += timedelta(days=1)

    def week_starts(self) -> list[date]:
        """Every Monday inside the window, ascending (52 or 53 for a year)."""
        first = week_start(self.start)
        if first < self.start:
            first += timedelta(days=7)

        mondays: list[date] = []
        current = first
        while current <= self.today:
            mondays.append(current)
            current += timedelta(days=7)
        return mondays
