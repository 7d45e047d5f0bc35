"""Parse raw GitHub REST payloads into typed records.

Each parser returns None when the payload does not have the expected shape;
callers drop those and carry on.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from gh_org_report.normalize.common import get_login, normalize_timestamp, short_text
from gh_org_report.normalize.models import (
    CodeFrequencyWeek,
    CommitRecord,
    IssueRecord,
    Member,
    PullRequestRecord,
    Repository,
)

logger = logging.getLogger(__name__)


def parse_repository(raw: Any) -> Repository | None:
    """Parse an item of ``GET /orgs/{org}/repos``."""
    if not isinstance(raw, dict) or not raw.get("name"):
        return None
    return Repository(
        name=str(raw["name"]),
        full_name=str(raw.get("full_name") or ""),
        html_url=str(raw.get("html_url") or ""),
        description=str(raw.get("description") or ""),
    )


def parse_member(raw: Any) -> Member | None:
    """Parse an item of ``GET /orgs/{org}/members``."""
    login = get_login(raw)
    if login is None:
        return None
    return Member(login=login, avatar_url=str(raw.get("avatar_url") or ""))


def parse_commit(raw: Any, repo: str) -> CommitRecord | None:
    """Parse an item of the commits listing.

    The author timestamp lives on the git commit object; the login lives on
    the top-level ``author`` field, which GitHub leaves null when the commit
    email is not linked to an account.

    Args:
        raw: Commit payload.
        repo: Repository name the commit was listed under.

    Returns:
        CommitRecord, or None for a malformed payload.
    """
    if not isinstance(raw, dict):
        return None

    commit_obj = raw.get("commit")
    if not isinstance(commit_obj, dict):
        return None

    author_info = commit_obj.get("author") or {}
    if not isinstance(author_info, dict):
        author_info = {}

    return CommitRecord(
        timestamp=normalize_timestamp(author_info.get("date")),
        repo=repo,
        author_name=author_info.get("name"),
        author_login=get_login(raw.get("author")),
        message=short_text(commit_obj.get("message")),
    )


def determine_pr_state(raw: dict[str, Any]) -> str:
    """Determine PR state (open/closed/merged).

    GitHub's state field only shows "open" or "closed"; a non-null
    ``merged_at`` distinguishes merged PRs.
    """
    if raw.get("merged_at") is not None:
        return "merged"
    return str(raw.get("state") or "open")


def parse_pull_request(raw: Any, repo: str) -> PullRequestRecord | None:
    """Parse an item of the pull request listing."""
    if not isinstance(raw, dict):
        return None
    return PullRequestRecord(
        timestamp=normalize_timestamp(raw.get("created_at")),
        repo=repo,
        author_login=get_login(raw.get("user")),
        state=determine_pr_state(raw),
        title=short_text(raw.get("title")),
    )


def parse_issue(raw: Any, repo: str) -> IssueRecord | None:
    """Parse an item of the issue listing, keeping the pull request flag."""
    if not isinstance(raw, dict):
        return None
    return IssueRecord(
        timestamp=normalize_timestamp(raw.get("created_at")),
        repo=repo,
        author_login=get_login(raw.get("user")),
        state=str(raw.get("state") or "open"),
        title=short_text(raw.get("title")),
        is_pull_request=bool(raw.get("pull_request")),
    )


def parse_code_frequency(raw: Any) -> list[CodeFrequencyWeek]:
    """Parse the code frequency statistics payload.

    GitHub returns ``[[unix_week, additions, -deletions], ...]``. Anything
    else (a still-computing placeholder, an error object, text) yields an
    empty list.

    Args:
        raw: Decoded JSON payload.

    Returns:
        Parsed weeks; malformed rows are skipped.
    """
    if not isinstance(raw, list):
        return []

    weeks: list[CodeFrequencyWeek] = []
    skipped = 0
    for row in raw:
        if not isinstance(row, list | tuple) or len(row) < 3:
            skipped += 1
            continue
        try:
            week = datetime.fromtimestamp(int(row[0]), tz=UTC)
            additions = abs(int(row[1] or 0))
            deletions = abs(int(row[2] or 0))
        except (TypeError, ValueError, OverflowError, OSError):
            skipped += 1
            continue
        weeks.append(CodeFrequencyWeek(week=week, additions=additions, deletions=deletions))

    if skipped:
        logger.debug("Skipped %d malformed code frequency rows", skipped)

    return weeks
