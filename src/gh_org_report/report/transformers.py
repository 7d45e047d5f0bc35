"""Shape report aggregates into template and chart friendly structures."""

import re
from collections.abc import Sequence
from datetime import date, timedelta
from typing import Any

from gh_org_report.metrics.calendar import DayBucket, monthly_totals
from gh_org_report.metrics.weekly import CodeChangeBucket, WeekBucket
from gh_org_report.metrics.window import week_start

__all__ = [
    "DAY_LABELS",
    "activity_chart",
    "calendar_grid",
    "chart_series",
    "month_labels",
    "monthly_chart",
    "safe_filename",
]

# Row labels of the calendar grid; only alternate rows are printed.
DAY_LABELS = ["Mon", "", "Wed", "", "Fri", "", ""]


def calendar_grid(calendar: Sequence[DayBucket]) -> list[list[DayBucket | None]]:
    """Lay a daily calendar out as Monday-start week columns.

    Days before the first bucket or after the last one are padded with None
    so every column holds exactly seven cells.

    Args:
        calendar: Dense, ascending day buckets.

    Returns:
        List of weeks, each a list of seven cells (Monday first).
    """
    if not calendar:
        return []

    by_date = {bucket.date: bucket for bucket in calendar}
    first = week_start(calendar[0].date)
    last = calendar[-1].date

    weeks: list[list[DayBucket | None]] = []
    current = first
    while current <= last:
        weeks.append([by_date.get(current + timedelta(days=offset)) for offset in range(7)])
        current += timedelta(days=7)
    return weeks


def month_labels(grid: Sequence[Sequence[DayBucket | None]]) -> list[str]:
    """Abbreviated month name for each column where a new month starts.

    Args:
        grid: Week columns from calendar_grid.

    Returns:
        One label per column, empty where the month does not change.
    """
    labels: list[str] = []
    last_month: tuple[int, int] | None = None
    for week in grid:
        first_day = next((cell.date for cell in week if cell is not None), None)
        if first_day is None:
            labels.append("")
            continue
        month = (first_day.year, first_day.month)
        if month != last_month:
            labels.append(first_day.strftime("%b"))
            last_month = month
        else:
            labels.append("")
    return labels


def _week_label(d: date) -> str:
    return f"{d.month}/{d.day}"


def chart_series(
    weekly_commits: Sequence[WeekBucket],
    weekly_code_changes: Sequence[CodeChangeBucket],
) -> dict[str, list[Any]]:
    """Align the weekly series on a shared label axis.

    Weeks missing from one series are plotted as zero.

    Returns:
        Dict with ``labels`` (``M/D``), ``commits``, ``additions`` and
        ``deletions`` lists of equal length.
    """
    commits = {bucket.week_start: bucket.count for bucket in weekly_commits}
    changes = {bucket.week_start: bucket for bucket in weekly_code_changes}
    weeks = sorted(set(commits) | set(changes))

    return {
        "labels": [_week_label(week) for week in weeks],
        "commits": [commits.get(week, 0) for week in weeks],
        "additions": [changes[week].additions if week in changes else 0 for week in weeks],
        "deletions": [changes[week].deletions if week in changes else 0 for week in weeks],
    }


def monthly_chart(calendar: Sequence[DayBucket]) -> dict[str, list[Any]]:
    """Monthly contribution totals with ``Mon YYYY`` labels."""
    totals = monthly_totals(calendar)
    labels = []
    for total in totals:
        year, month = total.month.split("-")
        labels.append(date(int(year), int(month), 1).strftime("%b %Y"))
    return {"labels": labels, "counts": [total.count for total in totals]}


def activity_chart(repositories: Sequence[Any]) -> dict[str, list[Any]]:
    """Per-repository commit and code change totals for bar charts."""
    return {
        "labels": [repo.name for repo in repositories],
        "commits": [repo.total_commits for repo in repositories],
        "additions": [repo.additions for repo in repositories],
        "deletions": [repo.deletions for repo in repositories],
    }


def safe_filename(name: str) -> str:
    """Lowercase name with every non-alphanumeric character replaced by ``_``."""
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower()
