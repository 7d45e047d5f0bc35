"""Data source: fetches an organization's activity from the GitHub REST API.

Every method returns typed records and never raises for a per-repository
failure. Such failures are logged and recorded in the source's ``FetchLog``,
which is how callers tell "no activity" apart from "could not fetch". Only
authentication failures, an exhausted rate limit and a failed repository
listing propagate.
"""

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from gh_org_report.config import CollectionConfig
from gh_org_report.github.http import GitHubHTTPError, RateLimitExceeded
from gh_org_report.github.rest import RestClient
from gh_org_report.normalize.models import (
    CodeFrequencyWeek,
    CommitRecord,
    IssueRecord,
    Member,
    PullRequestRecord,
    Repository,
)
from gh_org_report.normalize.records import (
    parse_code_frequency,
    parse_commit,
    parse_issue,
    parse_member,
    parse_pull_request,
    parse_repository,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMBER_PAGE_CAP = 10


class FetchFailure(BaseModel):
    """A fetch that failed; the affected records are missing from the report."""

    model_config = ConfigDict(frozen=True)

    repo: str | None
    endpoint: str
    message: str


@dataclass
class FetchLog:
    """Out-of-band record of what could not be fetched.

    Attributes:
        failures: Fetches that raised or returned an error status.
        pending_stats: Repositories whose statistics GitHub was still
            computing (HTTP 202); their code frequency counts as zero.
    """

    failures: list[FetchFailure] = field(default_factory=list)
    pending_stats: list[str] = field(default_factory=list)

    def record_failure(self, repo: str | None, endpoint: str, message: str) -> None:
        """Remember a failed fetch and log it."""
        logger.warning("Could not fetch %s for %s: %s", endpoint, repo or "organization", message)
        self.failures.append(FetchFailure(repo=repo, endpoint=endpoint, message=message))

    @property
    def ok(self) -> bool:
        """True when every fetch succeeded."""
        return not self.failures


class GitHubDataSource:
    """Fetches repositories, members and per-repository activity."""

    def __init__(
        self,
        rest: RestClient,
        organization: str,
        collection: CollectionConfig | None = None,
        fetch_log: FetchLog | None = None,
    ) -> None:
        """Initialize the data source.

        Args:
            rest: REST client.
            organization: Organization login.
            collection: Page caps and toggles.
            fetch_log: Log to record failures in; a new one by default.
        """
        self._rest = rest
        self.organization = organization
        self._collection = collection or CollectionConfig()
        self.fetch_log = fetch_log or FetchLog()

    async def _gather(
        self,
        pages: AsyncIterator[list[Any]],
        parse: Callable[[Any], T | None],
        repo: str | None,
        endpoint: str,
    ) -> list[T]:
        items: list[T] = []
        dropped = 0
        try:
            async for page in pages:
                for raw in page:
                    record = parse(raw)
                    if record is None:
                        dropped += 1
                    else:
                        items.append(record)
        except RateLimitExceeded:
            raise
        except GitHubHTTPError as e:
            self.fetch_log.record_failure(repo, endpoint, str(e))

        if dropped:
            logger.debug("Dropped %d malformed %s records for %s", dropped, endpoint, repo)
        return items

    async def list_repositories(self) -> list[Repository]:
        """List the organization's repositories.

        Raises:
            GitHubHTTPError: If the listing fails; there is nothing to report
                without it.
        """
        repos: list[Repository] = []
        async for page in self._rest.list_org_repos(self.organization):
            repos.extend(repo for repo in map(parse_repository, page) if repo is not None)
        logger.info("Found %d repositories in %s", len(repos), self.organization)
        return repos

    async def list_members(self) -> list[Member]:
        """List organization members (empty if the list is not visible)."""
        members = await self._gather(
            self._rest.list_org_members(self.organization, max_pages=MEMBER_PAGE_CAP),
            parse_member,
            None,
            "members",
        )
        logger.info("Found %d members in %s", len(members), self.organization)
        return members

    async def list_commits(self, repo: str, since: datetime) -> list[CommitRecord]:
        """List commits authored since the given instant."""
        return await self._gather(
            self._rest.list_commits(
                self.organization,
                repo,
                since=since.isoformat(),
                max_pages=self._collection.max_commit_pages,
            ),
            lambda raw: parse_commit(raw, repo),
            repo,
            "commits",
        )

    async def list_pull_requests(self, repo: str, since: datetime) -> list[PullRequestRecord]:
        """List pull requests created since the given instant.

        Pages arrive newest first, so paging stops at the first page that
        holds nothing newer than since.
        """
        records: list[PullRequestRecord] = []
        try:
            async for page in self._rest.list_pulls(
                self.organization, repo, max_pages=self._collection.max_pull_pages
            ):
                parsed = [pr for pr in (parse_pull_request(raw, repo) for raw in page) if pr]
                recent = [pr for pr in parsed if pr.timestamp is not None and pr.timestamp >= since]
                records.extend(recent)
                if parsed and not recent:
                    break
        except RateLimitExceeded:
            raise
        except GitHubHTTPError as e:
            self.fetch_log.record_failure(repo, "pulls", str(e))
        return records

    async def list_issues(self, repo: str, since: datetime) -> list[IssueRecord]:
        """List issues created since the given instant.

        The endpoint filters on update time and includes pull requests;
        creation time is checked here, pull requests are left for the
        normalizer to drop.
        """
        issues = await self._gather(
            self._rest.list_issues(
                self.organization,
                repo,
                since=since.isoformat(),
                max_pages=self._collection.max_issue_pages,
            ),
            lambda raw: parse_issue(raw, repo),
            repo,
            "issues",
        )
        return [issue for issue in issues if issue.timestamp is None or issue.timestamp >= since]

    async def code_frequency(self, repo: str) -> list[CodeFrequencyWeek]:
        """Weekly additions/deletions, empty while GitHub is still computing."""
        try:
            response = await self._rest.get_code_frequency(self.organization, repo)
        except RateLimitExceeded:
            raise
        except GitHubHTTPError as e:
            self.fetch_log.record_failure(repo, "code_frequency", str(e))
            return []

        if response.status_code == 202:
            logger.info("Code frequency for %s is still being computed", repo)
            self.fetch_log.pending_stats.append(repo)
            return []
        if response.status_code == 204 or response.status_code == 404:
            return []
        if not response.is_success:
            self.fetch_log.record_failure(
                repo, "code_frequency", f"status {response.status_code}"
            )
            return []

        if not isinstance(response.data, list):
            logger.warning("Unexpected code frequency payload for %s", repo)
            return []
        return parse_code_frequency(response.data)

    async def commit_count(self, repo: str) -> int:
        """All-time commit count of the default branch (0 on failure)."""
        try:
            return await self._rest.count_commits(self.organization, repo)
        except RateLimitExceeded:
            raise
        except GitHubHTTPError as e:
            self.fetch_log.record_failure(repo, "commit_count", str(e))
            return 0

    async def fetch_avatar(self, login: str) -> str | None:
        """Avatar URL of a user profile, None if it cannot be read."""
        try:
            user = await self._rest.get_user(login)
        except RateLimitExceeded:
            raise
        except GitHubHTTPError as e:
            logger.debug("Avatar lookup failed for %s: %s", login, e)
            return None
        if not user:
            return None
        avatar = user.get("avatar_url")
        return avatar if isinstance(avatar, str) and avatar else None
