"""Weekly series aggregators for charting.

Two series share the same windowing: every Monday inside the trailing window
gets a bucket, zero-filled, so chart axes line up across repositories even
when upstream returned nothing. Values whose Monday falls before the first
in-window Monday (the partial leading week) or after the window are dropped.

Series:
    - commits: commit events per week
    - code changes: additions/deletions per week from code frequency stats
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gh_org_report.metrics.window import ReportWindow, utc_day, week_start
from gh_org_report.normalize.models import CodeFrequencyWeek, ContributionEvent, EventKind

logger = logging.getLogger(__name__)


class WeekBucket(BaseModel):
    """Commit count for one Monday-start week."""

    model_config = ConfigDict(frozen=True)

    week_start: date
    count: int = Field(ge=0)


class CodeChangeBucket(BaseModel):
    """Lines added and deleted in one Monday-start week."""

    model_config = ConfigDict(frozen=True)

    week_start: date
    additions: int = Field(ge=0)
    deletions: int = Field(ge=0)


def build_weekly_commits(
    events: Iterable[ContributionEvent], window: ReportWindow
) -> list[WeekBucket]:
    """Count commit events per week.

    Pull request and issue events are ignored.

    Args:
        events: Contribution events in any order.
        window: Trailing window anchored on the run's as_of instant.

    Returns:
        Dense WeekBucket series, ascending by week_start.
    """
    counts: dict[date, int] = dict.fromkeys(window.week_starts(), 0)

    for event in events:
        if event.kind is not EventKind.COMMIT:
            continue
        day = utc_day(event.occurred_at)
        if not window.contains(day):
            continue
        key = week_start(day)
        if key in counts:
            counts[key] += 1

    return [WeekBucket(week_start=key, count=count) for key, count in sorted(counts.items())]


def build_weekly_code_changes(weeks: Any, window: ReportWindow) -> list[CodeChangeBucket]:
    """Sum code frequency rows per week.

    An empty, still-computing or malformed upstream payload contributes
    nothing; the dense zero series is returned.

    Args:
        weeks: CodeFrequencyWeek rows from the data source (any order).
        window: Trailing window anchored on the run's as_of instant.

    Returns:
        Dense CodeChangeBucket series, ascending by week_start.
    """
    totals: dict[date, list[int]] = {key: [0, 0] for key in window.week_starts()}

    rows: Iterable[Any] = () if isinstance(weeks, str | bytes | dict) else weeks or ()
    if not isinstance(rows, Iterable):
        logger.debug("Ignoring non-iterable code frequency payload: %r", type(weeks))
        rows = ()

    for row in rows:
        if not isinstance(row, CodeFrequencyWeek):
            continue
        day = utc_day(row.week)
        if not window.contains(day):
            continue
        key = week_start(day)
        if key not in totals:
            continue
        totals[key][0] += max(row.additions, 0)
        totals[key][1] += max(row.deletions, 0)

    return [
        CodeChangeBucket(week_start=key, additions=additions, deletions=deletions)
        for key, (additions, deletions) in sorted(totals.items())
    ]
