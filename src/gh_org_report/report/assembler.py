"""Report assembler.

Combines the calendar, the weekly series, the ranked contributors and the
scalar counts of one scope into an immutable ``ContributionReport`` that the
HTML, PDF and JSON renderers consume. Assembly does not recompute anything;
it checks the aggregate contracts before handing the data over.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from gh_org_report.metrics.calendar import DayBucket, build_calendar
from gh_org_report.metrics.contributors import ContributorRanker, ContributorRecord
from gh_org_report.metrics.weekly import (
    CodeChangeBucket,
    WeekBucket,
    build_weekly_code_changes,
    build_weekly_commits,
)
from gh_org_report.metrics.window import ReportWindow
from gh_org_report.normalize.models import (
    CodeFrequencyWeek,
    ContributionEvent,
    EventKind,
    Member,
)

logger = logging.getLogger(__name__)


class ReportAssemblyError(Exception):
    """Raised when aggregates handed to the assembler break their contract."""


class ReportStats(BaseModel):
    """Scalar totals for one scope."""

    model_config = ConfigDict(frozen=True)

    total_commits: int = Field(ge=0)
    total_prs: int = Field(ge=0)
    total_issues: int = Field(ge=0)
    total_contributions: int = Field(ge=0)
    total_repos: int = Field(ge=0)
    total_members: int = Field(default=0, ge=0)
    total_contributors: int = Field(default=0, ge=0)


class ContributionReport(BaseModel):
    """Finalized, renderer-agnostic aggregate for one scope."""

    model_config = ConfigDict(frozen=True)

    as_of: datetime
    window_start: date
    window_end: date
    stats: ReportStats
    calendar: tuple[DayBucket, ...]
    weekly_commits: tuple[WeekBucket, ...]
    weekly_code_changes: tuple[CodeChangeBucket, ...]
    top_contributors: tuple[ContributorRecord, ...]


def _check_calendar(calendar: Sequence[DayBucket], window: ReportWindow) -> None:
    expected = list(window.iter_days())
    actual = [bucket.date for bucket in calendar]
    if actual != expected:
        msg = (
            f"Calendar must hold one bucket per day from {window.start} to {window.today} "
            f"({len(expected)} days), got {len(actual)}"
        )
        raise ReportAssemblyError(msg)


def _check_weekly(
    series: Sequence[WeekBucket] | Sequence[CodeChangeBucket],
    window: ReportWindow,
    name: str,
) -> None:
    expected = window.week_starts()
    actual = [bucket.week_start for bucket in series]
    if actual != expected:
        msg = f"{name} must hold one bucket per Monday of the window ({len(expected)}), got {len(actual)}"
        raise ReportAssemblyError(msg)


def _check_ranked(contributors: Sequence[ContributorRecord]) -> None:
    totals = [record.total for record in contributors]
    if any(later > earlier for earlier, later in zip(totals, totals[1:], strict=False)):
        msg = "Contributors must be sorted by total, descending"
        raise ReportAssemblyError(msg)
    for record in contributors:
        if record.total != record.commits + 2 * record.prs + record.issues:
            msg = f"Inconsistent total for contributor {record.login}"
            raise ReportAssemblyError(msg)


def assemble_report(
    calendar: Sequence[DayBucket],
    weekly_commits: Sequence[WeekBucket],
    weekly_code_changes: Sequence[CodeChangeBucket],
    top_contributors: Sequence[ContributorRecord],
    *,
    window: ReportWindow,
    total_commits: int,
    total_prs: int,
    total_issues: int,
    total_repos: int,
    total_members: int = 0,
    total_contributors: int = 0,
) -> ContributionReport:
    """Assemble and validate the report for one scope.

    Args:
        calendar: Dense daily buckets from build_calendar.
        weekly_commits: Dense weekly commit series.
        weekly_code_changes: Dense weekly code change series.
        top_contributors: Ranked, capped contributor records.
        window: Window all aggregates were computed on.
        total_commits: Commit count for the scope.
        total_prs: Pull request count for the scope.
        total_issues: Issue count for the scope.
        total_repos: Repositories covered by the scope.
        total_members: Organization members (0 for a repository scope).
        total_contributors: Logins with at least one contribution.

    Returns:
        Frozen ContributionReport.

    Raises:
        ReportAssemblyError: If an aggregate is not dense, not sorted or
            not aligned with the window.
    """
    _check_calendar(calendar, window)
    _check_weekly(weekly_commits, window, "Weekly commit series")
    _check_weekly(weekly_code_changes, window, "Weekly code change series")
    _check_ranked(top_contributors)

    stats = ReportStats(
        total_commits=total_commits,
        total_prs=total_prs,
        total_issues=total_issues,
        total_contributions=total_commits + total_prs * 2 + total_issues,
        total_repos=total_repos,
        total_members=total_members,
        total_contributors=total_contributors,
    )

    return ContributionReport(
        as_of=window.as_of,
        window_start=window.start,
        window_end=window.today,
        stats=stats,
        calendar=tuple(calendar),
        weekly_commits=tuple(weekly_commits),
        weekly_code_changes=tuple(weekly_code_changes),
        top_contributors=tuple(top_contributors),
    )


def build_scope_report(
    events: Iterable[ContributionEvent],
    code_frequency: Iterable[CodeFrequencyWeek],
    window: ReportWindow,
    *,
    top_n: int,
    total_repos: int,
    members: Sequence[Member] = (),
    is_excluded: Callable[[str], bool] | None = None,
) -> ContributionReport:
    """Run every aggregator for one scope and assemble the result.

    Scalar totals count in-window events only, so ``total_contributions``
    equals the sum of the calendar.

    Args:
        events: Normalized events for the scope.
        code_frequency: Code frequency rows for the scope.
        window: Window shared by the whole run.
        top_n: Cap on ranked contributors.
        total_repos: Repositories covered by the scope.
        members: Organization members to seed the ranking with.
        is_excluded: Optional predicate for logins left out of the ranking.

    Returns:
        Assembled ContributionReport.
    """
    in_window = [event for event in events if window.contains_instant(event.occurred_at)]

    ranker = ContributorRanker(members=members, is_excluded=is_excluded)
    ranker.add_events(in_window)

    kinds = [event.kind for event in in_window]

    report = assemble_report(
        build_calendar(in_window, window),
        build_weekly_commits(in_window, window),
        build_weekly_code_changes(list(code_frequency), window),
        ranker.ranked(top_n),
        window=window,
        total_commits=kinds.count(EventKind.COMMIT),
        total_prs=kinds.count(EventKind.PULL_REQUEST),
        total_issues=kinds.count(EventKind.ISSUE),
        total_repos=total_repos,
        total_members=len(members),
        total_contributors=ranker.active_count(),
    )

    logger.debug(
        "Assembled report: %d contributions, %d contributors",
        report.stats.total_contributions,
        report.stats.total_contributors,
    )
    return report
