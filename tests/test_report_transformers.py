"""Tests for report data transformers."""

from datetime import date

from gh_org_report.collect.orchestrator import RepoActivity
from gh_org_report.metrics.calendar import build_calendar
from gh_org_report.metrics.weekly import CodeChangeBucket, WeekBucket
from gh_org_report.metrics.window import ReportWindow
from gh_org_report.report.transformers import (
    activity_chart,
    calendar_grid,
    chart_series,
    month_labels,
    monthly_chart,
    safe_filename,
)


class TestCalendarGrid:
    """Tests for calendar_grid and month_labels."""

    def test_columns_are_monday_start_weeks(self, window: ReportWindow) -> None:
        """Every column holds seven cells starting on a Monday."""
        grid = calendar_grid(build_calendar([], window))

        assert len(grid) == 53
        assert all(len(week) == 7 for week in grid)
        first_cells = [cell for cell in grid[0] if cell is not None]
        assert first_cells[0].date == date(2024, 6, 15)
        assert grid[0][:5] == [None] * 5
        assert grid[-1][0] is not None and grid[-1][0].date == date(2025, 6, 9)
        assert grid[-1][6] is not None and grid[-1][6].date == date(2025, 6, 15)

    def test_every_day_placed_once(self, window: ReportWindow) -> None:
        """Padding aside, the grid holds the whole calendar."""
        calendar = build_calendar([], window)
        cells = [cell for week in calendar_grid(calendar) for cell in week if cell is not None]
        assert cells == calendar

    def test_empty_calendar(self) -> None:
        """No buckets, no columns."""
        assert calendar_grid([]) == []

    def test_month_labels(self, window: ReportWindow) -> None:
        """One label per column, set where a new month starts."""
        grid = calendar_grid(build_calendar([], window))
        labels = month_labels(grid)

        assert len(labels) == len(grid)
        assert labels[0] == "Jun"
        assert len([label for label in labels if label]) == 13
        assert labels[1] == ""


class TestChartSeries:
    """Tests for chart data shaping."""

    def test_weekly_series_aligned(self) -> None:
        """Weeks missing from one series plot as zero."""
        commits = [WeekBucket(week_start=date(2025, 1, 6), count=4)]
        changes = [CodeChangeBucket(week_start=date(2025, 1, 13), additions=10, deletions=2)]

        series = chart_series(commits, changes)

        assert series == {
            "labels": ["1/6", "1/13"],
            "commits": [4, 0],
            "additions": [0, 10],
            "deletions": [0, 2],
        }

    def test_monthly_chart(self, window: ReportWindow, event) -> None:
        """Monthly totals get ``Mon YYYY`` labels."""
        calendar = build_calendar([event(date(2025, 2, 10)), event(date(2025, 2, 11))], window)

        chart = monthly_chart(calendar)

        assert chart["labels"][0] == "Jun 2024"
        assert chart["labels"][-1] == "Jun 2025"
        assert len(chart["labels"]) == 13
        assert chart["counts"][chart["labels"].index("Feb 2025")] == 2

    def test_activity_chart(self) -> None:
        """Repository totals line up by name."""
        repos = [
            RepoActivity(name="api", total_commits=10, additions=5, deletions=1),
            RepoActivity(name="web", total_commits=2),
        ]

        assert activity_chart(repos) == {
            "labels": ["api", "web"],
            "commits": [10, 2],
            "additions": [5, 0],
            "deletions": [1, 0],
        }


def test_safe_filename() -> None:
    """Non-alphanumerics become underscores and case is folded."""
    assert safe_filename("Web.App-v2") == "web_app_v2"
    assert safe_filename("api") == "api"
