"""Tests for the contribution calendar aggregator."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from gh_org_report.metrics.calendar import (
    DayBucket,
    build_calendar,
    contribution_level,
    monthly_totals,
)
from gh_org_report.metrics.window import ReportWindow
from gh_org_report.normalize.models import EventKind


class TestContributionLevel:
    """Tests for contribution_level."""

    @pytest.mark.parametrize(
        ("count", "max_count", "expected"),
        [
            (0, 10, 0),
            (1, 4, 1),
            (2, 4, 2),
            (3, 4, 3),
            (4, 4, 4),
            (2, 8, 1),
            (3, 8, 2),
            (4, 8, 2),
            (5, 8, 3),
            (6, 8, 3),
            (7, 8, 4),
            (1, 1, 4),
        ],
    )
    def test_thresholds(self, count: int, max_count: int, expected: int) -> None:
        """Boundaries belong to the lower level."""
        assert contribution_level(count, max_count) == expected

    def test_max_floored_at_one(self) -> None:
        """A zero maximum does not divide by zero."""
        assert contribution_level(1, 0) == 4
        assert contribution_level(0, 0) == 0

    def test_monotone_in_count(self) -> None:
        """For a fixed maximum, more contributions never lower the level."""
        for max_count in range(1, 40):
            levels = [contribution_level(c, max_count) for c in range(max_count + 1)]
            assert levels == sorted(levels)


class TestBuildCalendar:
    """Tests for build_calendar."""

    def test_empty_events_give_dense_zero_calendar(self, window: ReportWindow) -> None:
        """No events still yields one bucket per day."""
        calendar = build_calendar([], window)

        assert len(calendar) == 366
        assert [b.date for b in calendar] == list(window.iter_days())
        assert all(b.count == 0 and b.level == 0 for b in calendar)

    def test_weights_summed_per_day(self, window: ReportWindow, event) -> None:
        """Commit, pull request and issue on one day add up to 4."""
        day = date(2025, 3, 3)
        events = [
            event(day, EventKind.COMMIT),
            event(day, EventKind.PULL_REQUEST),
            event(day, EventKind.ISSUE),
        ]

        by_date = {b.date: b for b in build_calendar(events, window)}

        assert by_date[day].count == 4
        assert by_date[day].level == 4

    def test_pr_and_issue_on_same_day(self, window: ReportWindow, event) -> None:
        """A PR and an issue give count 3; as the only active day it is level 4."""
        day = date(2025, 1, 20)
        calendar = build_calendar(
            [event(day, EventKind.PULL_REQUEST), event(day, EventKind.ISSUE)], window
        )

        active = [b for b in calendar if b.count]
        assert active == [DayBucket(date=day, count=3, level=4)]

    def test_events_outside_window_ignored(self, window: ReportWindow, event) -> None:
        """Events 400 days back or after as_of leave every bucket at zero."""
        events = [
            event(window.today - timedelta(days=400)),
            event(window.today + timedelta(days=1)),
        ]
        assert all(b.count == 0 for b in build_calendar(events, window))

    def test_window_endpoints_inclusive(self, window: ReportWindow, event) -> None:
        """Events on the first and the last day are counted."""
        calendar = build_calendar([event(window.start), event(window.today)], window)

        assert calendar[0].count == 1
        assert calendar[-1].count == 1

    def test_buckets_by_utc_day(self, window: ReportWindow, event) -> None:
        """A late-evening event west of UTC lands on the next UTC day."""
        minus_five = timezone(timedelta(hours=-5))
        when = datetime(2025, 3, 1, 23, 30, tzinfo=minus_five)

        by_date = {b.date: b.count for b in build_calendar([event(when)], window)}

        assert by_date[date(2025, 3, 2)] == 1
        assert by_date[date(2025, 3, 1)] == 0

    def test_levels_relative_to_busiest_day(self, window: ReportWindow, event) -> None:
        """Levels follow the window maximum."""
        events = [event(date(2025, 2, 3))] * 8 + [event(date(2025, 2, 4))] * 2
        by_date = {b.date: b for b in build_calendar(events, window)}

        assert by_date[date(2025, 2, 3)].level == 4
        assert by_date[date(2025, 2, 4)].level == 1

    def test_level_zero_iff_count_zero(self, window: ReportWindow, event) -> None:
        """Level 0 exactly when the count is 0, monotone in count."""
        events = []
        for offset in range(0, 300, 7):
            events.extend([event(window.start + timedelta(days=offset))] * (offset % 13))

        calendar = build_calendar(events, window)

        for bucket in calendar:
            assert (bucket.level == 0) == (bucket.count == 0)
        ordered = sorted(calendar, key=lambda b: b.count)
        assert [b.level for b in ordered] == sorted(b.level for b in ordered)

    def test_idempotent(self, window: ReportWindow, event) -> None:
        """Same input, same window, same output."""
        events = [event(date(2025, 1, d)) for d in range(1, 28)]
        assert build_calendar(events, window) == build_calendar(events, window)

    def test_accepts_generator(self, window: ReportWindow, event) -> None:
        """Events may be a one-shot iterable."""
        calendar = build_calendar((event(date(2025, 5, 5)) for _ in range(3)), window)
        assert sum(b.count for b in calendar) == 3


class TestMonthlyTotals:
    """Tests for monthly_totals."""

    def test_sums_per_month(self, event) -> None:
        """Totals are grouped by YYYY-MM and sorted."""
        window = ReportWindow(as_of=datetime(2025, 6, 15, tzinfo=UTC))
        events = [event(date(2025, 5, 1)), event(date(2025, 5, 31)), event(date(2025, 6, 1))]

        totals = monthly_totals(build_calendar(events, window))

        assert totals[0].month == "2024-06"
        assert totals[-1].month == "2025-06"
        by_month = {t.month: t.count for t in totals}
        assert by_month["2025-05"] == 2
        assert by_month["2025-06"] == 1
        assert len(totals) == 13

    def test_empty(self) -> None:
        """No buckets, no months."""
        assert monthly_totals([]) == []
