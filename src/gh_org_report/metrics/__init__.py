"""Aggregators for calendars, weekly series and contributor rankings."""

from gh_org_report.metrics.calendar import (
    DayBucket,
    MonthTotal,
    build_calendar,
    contribution_level,
    monthly_totals,
)
from gh_org_report.metrics.contributors import (
    ContributorRanker,
    ContributorRecord,
    rank_contributors,
)
from gh_org_report.metrics.weekly import (
    CodeChangeBucket,
    WeekBucket,
    build_weekly_code_changes,
    build_weekly_commits,
)
from gh_org_report.metrics.window import ReportWindow, week_start

__all__ = [
    "CodeChangeBucket",
    "ContributorRanker",
    "ContributorRecord",
    "DayBucket",
    "MonthTotal",
    "ReportWindow",
    "WeekBucket",
    "build_calendar",
    "build_weekly_code_changes",
    "build_weekly_commits",
    "contribution_level",
    "monthly_totals",
    "rank_contributors",
    "week_start",
]
