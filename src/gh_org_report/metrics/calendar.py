"""Contribution calendar aggregator.

Buckets contribution events by UTC day over the trailing window and assigns
each day a 0-4 intensity level relative to the busiest day of the window.

Levels (max_count = busiest day, floored at 1):
    - 0: no contributions
    - 1: count <= 25% of max_count
    - 2: count <= 50% of max_count
    - 3: count <= 75% of max_count
    - 4: above 75% of max_count

Levels are window-relative: recomputing with a different window may move the
same day to another level.
"""

import logging
from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from gh_org_report.metrics.window import ReportWindow, utc_day
from gh_org_report.normalize.models import ContributionEvent

logger = logging.getLogger(__name__)

MAX_LEVEL = 4


class DayBucket(BaseModel):
    """Contributions on one UTC calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(ge=0)
    level: int = Field(ge=0, le=MAX_LEVEL)


class MonthTotal(BaseModel):
    """Contributions summed over a calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str
    count: int = Field(ge=0)


def contribution_level(count: int, max_count: int) -> int:
    """Classify a day's count relative to the window maximum.

    Thresholds are inclusive upper bounds, compared in integer arithmetic so
    a count sitting exactly on a boundary takes the lower level.

    Args:
        count: Contributions on the day.
        max_count: Largest daily count in the window (at least 1).

    Returns:
        Level in [0, 4].
    """
    if count <= 0:
        return 0
    max_count = max(max_count, 1)
    if 4 * count <= max_count:
        return 1
    if 2 * count <= max_count:
        return 2
    if 4 * count <= 3 * max_count:
        return 3
    return MAX_LEVEL


def build_calendar(
    events: Iterable[ContributionEvent], window: ReportWindow
) -> list[DayBucket]:
    """Build the dense daily contribution calendar.

    Args:
        events: Contribution events in any order.
        window: Trailing window anchored on the run's as_of instant.

    Returns:
        One DayBucket per day of the window, ascending by date.
    """
    counts: dict[date, int] = dict.fromkeys(window.iter_days(), 0)

    outside = 0
    for event in events:
        day = utc_day(event.occurred_at)
        if day not in counts:
            outside += 1
            continue
        counts[day] += event.weight

    if outside:
        logger.debug("Ignored %d events outside %s..%s", outside, window.start, window.today)

    max_count = max(max(counts.values(), default=0), 1)

    return [
        DayBucket(date=day, count=count, level=contribution_level(count, max_count))
        for day, count in sorted(counts.items())
    ]


def monthly_totals(calendar: Iterable[DayBucket]) -> list[MonthTotal]:
    """Sum a daily calendar into YYYY-MM totals, ascending.

    Args:
        calendar: Day buckets, typically from build_calendar.

    Returns:
        One MonthTotal per month present in the calendar.
    """
    totals: dict[str, int] = {}
    for bucket in calendar:
        key = f"{bucket.date.year}-{bucket.date.month:02d}"
        totals[key] = totals.get(key, 0) + bucket.count
    return [MonthTotal(month=month, count=count) for month, count in sorted(totals.items())]
