"""Typed records handed over by the data source, and the uniform event shape.

The records mirror what the GitHub REST endpoints return, reduced to the
fields the aggregation engine needs. ``ContributionEvent`` is the single shape
every aggregator consumes.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EventKind(str, Enum):
    """Kind of contribution."""

    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    ISSUE = "issue"


# Fixed policy: a pull request counts as two contributions.
EVENT_WEIGHTS: dict[EventKind, int] = {
    EventKind.COMMIT: 1,
    EventKind.PULL_REQUEST: 2,
    EventKind.ISSUE: 1,
}


@dataclass(frozen=True)
class ContributionEvent:
    """One dated contribution.

    Attributes:
        occurred_at: Aware UTC timestamp of the contribution.
        actor: Resolvable login, or None when GitHub could not attribute it.
        repo: Repository name.
        kind: Commit, pull request or issue.
        weight: Contribution weight, fixed per kind.
    """

    occurred_at: datetime
    actor: str | None
    repo: str
    kind: EventKind
    weight: int


@dataclass(frozen=True)
class Repository:
    """Repository listed for the organization."""

    name: str
    full_name: str = ""
    html_url: str = ""
    description: str = ""


@dataclass(frozen=True)
class Member:
    """Organization member used to seed contributor rankings."""

    login: str
    avatar_url: str = ""


@dataclass(frozen=True)
class CommitRecord:
    """Commit as listed by ``GET /repos/{owner}/{repo}/commits``."""

    timestamp: datetime | None
    repo: str
    author_name: str | None = None
    author_login: str | None = None
    message: str = ""


@dataclass(frozen=True)
class PullRequestRecord:
    """Pull request as listed by ``GET /repos/{owner}/{repo}/pulls``."""

    timestamp: datetime | None
    repo: str
    author_login: str | None = None
    state: str = "open"
    title: str = ""


@dataclass(frozen=True)
class IssueRecord:
    """Issue as listed by ``GET /repos/{owner}/{repo}/issues``.

    The issues endpoint also returns pull requests; ``is_pull_request`` marks
    them so the normalizer can drop them.
    """

    timestamp: datetime | None
    repo: str
    author_login: str | None = None
    state: str = "open"
    title: str = ""
    is_pull_request: bool = False


@dataclass(frozen=True)
class CodeFrequencyWeek:
    """One row of ``GET /repos/{owner}/{repo}/stats/code_frequency``.

    Deletions are stored as a magnitude.
    """

    week: datetime
    additions: int
    deletions: int
