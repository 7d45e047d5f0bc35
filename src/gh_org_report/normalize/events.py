"""Event normalizer.

Maps commit, pull request and issue records into ``ContributionEvent`` values.
The mapping is pure. Absent or malformed input yields an empty list rather
than an error: whether a fetch failed is reported by the data source's
``FetchLog``, not by these functions.
"""

import logging
from collections.abc import Iterable
from typing import Any

from gh_org_report.normalize.models import (
    EVENT_WEIGHTS,
    CommitRecord,
    ContributionEvent,
    EventKind,
    IssueRecord,
    PullRequestRecord,
)

logger = logging.getLogger(__name__)

__all__ = [
    "normalize_all",
    "normalize_commits",
    "normalize_issues",
    "normalize_pull_requests",
]


def _iter_records(records: Any, record_type: type) -> Iterable[Any]:
    """Yield items of record_type, tolerating None and non-iterables."""
    if records is None or isinstance(records, str | bytes | dict):
        return
    try:
        iterator = iter(records)
    except TypeError:
        logger.debug("Ignoring non-iterable %s input", record_type.__name__)
        return
    for record in iterator:
        if isinstance(record, record_type):
            yield record


def _to_event(
    record: CommitRecord | PullRequestRecord | IssueRecord,
    actor: str | None,
    kind: EventKind,
) -> ContributionEvent | None:
    if record.timestamp is None:
        return None
    return ContributionEvent(
        occurred_at=record.timestamp,
        actor=actor,
        repo=record.repo,
        kind=kind,
        weight=EVENT_WEIGHTS[kind],
    )


def normalize_commits(records: Iterable[CommitRecord] | None) -> list[ContributionEvent]:
    """Convert commit records to events of weight 1.

    The actor is the GitHub login linked to the commit author, or None when
    the commit email is not linked to an account.

    Args:
        records: Commit records from the data source.

    Returns:
        Commit events; undated records are dropped.
    """
    events: list[ContributionEvent] = []
    dropped = 0
    for record in _iter_records(records, CommitRecord):
        event = _to_event(record, record.author_login, EventKind.COMMIT)
        if event is None:
            dropped += 1
            continue
        events.append(event)

    if dropped:
        logger.debug("Dropped %d commits without an author date", dropped)
    return events


def normalize_pull_requests(
    records: Iterable[PullRequestRecord] | None,
) -> list[ContributionEvent]:
    """Convert pull request records to events of weight 2, dated at creation."""
    events: list[ContributionEvent] = []
    dropped = 0
    for record in _iter_records(records, PullRequestRecord):
        event = _to_event(record, record.author_login, EventKind.PULL_REQUEST)
        if event is None:
            dropped += 1
            continue
        events.append(event)

    if dropped:
        logger.debug("Dropped %d pull requests without created_at", dropped)
    return events


def normalize_issues(records: Iterable[IssueRecord] | None) -> list[ContributionEvent]:
    """Convert issue records to events of weight 1.

    The issues endpoint also lists pull requests; those are filtered out here
    so they are not counted twice.
    """
    events: list[ContributionEvent] = []
    for record in _iter_records(records, IssueRecord):
        if record.is_pull_request:
            continue
        event = _to_event(record, record.author_login, EventKind.ISSUE)
        if event is not None:
            events.append(event)
    return events


def normalize_all(
    commits: Iterable[CommitRecord] | None,
    pull_requests: Iterable[PullRequestRecord] | None,
    issues: Iterable[IssueRecord] | None,
) -> list[ContributionEvent]:
    """Normalize the three record streams, commits first, then PRs, then issues."""
    return [
        *normalize_commits(commits),
        *normalize_pull_requests(pull_requests),
        *normalize_issues(issues),
    ]
