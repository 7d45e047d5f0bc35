"""Collection orchestrator.

Runs one report: freezes the reporting instant, fetches every repository's
activity through the data source, normalizes it and hands the events to the
aggregation engine for the organization and for each repository. The result
is an ``OrgReportBundle`` that the renderers and the JSON export consume.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from gh_org_report.collect.source import FetchFailure, GitHubDataSource
from gh_org_report.config import Config
from gh_org_report.github.auth import GitHubAuth
from gh_org_report.github.http import GitHubClient, GitHubHTTPError, RateLimitExceeded
from gh_org_report.github.rest import RestClient
from gh_org_report.metrics.contributors import ContributorRecord
from gh_org_report.metrics.window import ReportWindow
from gh_org_report.normalize.events import normalize_all
from gh_org_report.normalize.identity import BotDetector
from gh_org_report.normalize.models import (
    CodeFrequencyWeek,
    CommitRecord,
    ContributionEvent,
    IssueRecord,
    Member,
    PullRequestRecord,
    Repository,
)
from gh_org_report.report.assembler import ContributionReport, build_scope_report

logger = logging.getLogger(__name__)


class CollectionError(Exception):
    """Raised when collection orchestration fails."""


class RepoActivity(BaseModel):
    """All-time code summary of one repository."""

    model_config = ConfigDict(frozen=True)

    name: str
    html_url: str = ""
    description: str = ""
    total_commits: int = Field(default=0, ge=0)
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)


class OrgReportBundle(BaseModel):
    """Everything one run produced, ready for rendering."""

    model_config = ConfigDict(frozen=True)

    organization: str
    generated_at: datetime
    org_report: ContributionReport
    repo_reports: dict[str, ContributionReport] = Field(default_factory=dict)
    repositories: list[RepoActivity] = Field(default_factory=list)
    fetch_failures: list[FetchFailure] = Field(default_factory=list)
    pending_stats: list[str] = Field(default_factory=list)


@dataclass
class RepoCollection:
    """Raw records fetched for one repository."""

    repository: Repository
    commits: list[CommitRecord] = field(default_factory=list)
    pull_requests: list[PullRequestRecord] = field(default_factory=list)
    issues: list[IssueRecord] = field(default_factory=list)
    code_frequency: list[CodeFrequencyWeek] = field(default_factory=list)
    total_commits: int = 0

    def events(self) -> list[ContributionEvent]:
        """Normalized contribution events of this repository."""
        return normalize_all(self.commits, self.pull_requests, self.issues)

    def activity(self) -> RepoActivity:
        """Code summary of this repository."""
        return RepoActivity(
            name=self.repository.name,
            html_url=self.repository.html_url,
            description=self.repository.description,
            total_commits=self.total_commits,
            additions=sum(week.additions for week in self.code_frequency),
            deletions=sum(week.deletions for week in self.code_frequency),
        )


async def _collect_repo(
    source: GitHubDataSource,
    repository: Repository,
    window: ReportWindow,
    include_code_frequency: bool,
) -> RepoCollection:
    name = repository.name
    collection = RepoCollection(repository=repository)
    collection.commits = await source.list_commits(name, window.since)
    collection.pull_requests = await source.list_pull_requests(name, window.since)
    collection.issues = await source.list_issues(name, window.since)
    if include_code_frequency:
        collection.code_frequency = await source.code_frequency(name)
        collection.total_commits = await source.commit_count(name)

    logger.info(
        "  %s: %d commits, %d PRs, %d issues",
        name,
        len(collection.commits),
        len(collection.pull_requests),
        len(collection.issues),
    )
    return collection


async def _collect_repos_parallel(
    source: GitHubDataSource,
    repos: list[Repository],
    window: ReportWindow,
    max_concurrency: int,
    include_code_frequency: bool,
) -> list[RepoCollection]:
    """Fetch every repository with at most max_concurrency in flight.

    Results keep the order of repos.
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def process_repo(idx: int, repository: Repository) -> RepoCollection:
        async with semaphore:
            logger.info("[%d/%d] Processing %s", idx, len(repos), repository.name)
            return await _collect_repo(source, repository, window, include_code_frequency)

    tasks = [process_repo(idx, repo) for idx, repo in enumerate(repos, 1)]
    return list(await asyncio.gather(*tasks))


def _mark_members(
    contributors: tuple[ContributorRecord, ...],
    members: dict[str, Member],
) -> tuple[ContributorRecord, ...]:
    """Flag organization members in a scope ranked without the member seed."""
    marked = []
    for record in contributors:
        member = members.get(record.login)
        if member is None or record.is_member:
            marked.append(record)
            continue
        update: dict[str, object] = {"is_member": True}
        if member.avatar_url:
            update["avatar_url"] = member.avatar_url
        marked.append(record.model_copy(update=update))
    return tuple(marked)


async def _enrich_avatars(
    source: GitHubDataSource,
    contributors: tuple[ContributorRecord, ...],
    cache: dict[str, str | None],
) -> tuple[ContributorRecord, ...]:
    """Replace identicon fallbacks of non-members with their profile avatar."""
    enriched = []
    for record in contributors:
        if record.is_member:
            enriched.append(record)
            continue
        if record.login not in cache:
            cache[record.login] = await source.fetch_avatar(record.login)
        avatar = cache[record.login]
        enriched.append(record.model_copy(update={"avatar_url": avatar}) if avatar else record)
    return tuple(enriched)


async def collect_with_source(
    source: GitHubDataSource,
    config: Config,
    window: ReportWindow,
) -> OrgReportBundle:
    """Fetch and aggregate through an existing data source.

    Args:
        source: Data source for the configured organization.
        config: Application configuration.
        window: Frozen reporting window shared by every aggregate.

    Returns:
        Bundle with the organization report and the per-repository reports.

    Raises:
        CollectionError: If the repository list cannot be fetched.
    """
    logger.info(
        "Collecting %s: %s to %s", source.organization, window.start.isoformat(), window.today.isoformat()
    )

    try:
        repos = await source.list_repositories()
    except RateLimitExceeded:
        raise
    except GitHubHTTPError as e:
        msg = f"Could not list repositories of {source.organization}: {e}"
        raise CollectionError(msg) from e

    members: list[Member] = await source.list_members()
    members_by_login = {member.login: member for member in members}

    if not repos:
        logger.warning("No repositories found for %s", source.organization)

    collections = await _collect_repos_parallel(
        source,
        repos,
        window,
        config.collection.max_concurrency,
        config.collection.include_code_frequency,
    )

    is_excluded = None
    if config.identity.exclude_bots:
        is_excluded = BotDetector.from_config(config.identity.bots).is_bot

    repo_events = {c.repository.name: c.events() for c in collections}
    org_events = [event for events in repo_events.values() for event in events]
    org_code_frequency = [week for c in collections for week in c.code_frequency]

    org_report = build_scope_report(
        org_events,
        org_code_frequency,
        window,
        top_n=config.ranking.org_top_n,
        total_repos=len(repos),
        members=members,
        is_excluded=is_excluded,
    )

    avatar_cache: dict[str, str | None] = {}
    if config.ranking.fetch_avatars:
        org_report = org_report.model_copy(
            update={
                "top_contributors": await _enrich_avatars(
                    source, org_report.top_contributors, avatar_cache
                )
            }
        )

    repo_reports: dict[str, ContributionReport] = {}
    if config.collection.per_repo_reports:
        for collection in collections:
            name = collection.repository.name
            report = build_scope_report(
                repo_events[name],
                collection.code_frequency,
                window,
                top_n=config.ranking.repo_top_n,
                total_repos=1,
                is_excluded=is_excluded,
            )
            marked = _mark_members(report.top_contributors, members_by_login)
            report = report.model_copy(update={"top_contributors": marked})
            if config.ranking.fetch_avatars:
                report = report.model_copy(
                    update={
                        "top_contributors": await _enrich_avatars(
                            source, report.top_contributors, avatar_cache
                        )
                    }
                )
            repo_reports[name] = report

    fetch_log = source.fetch_log
    if fetch_log.failures:
        logger.warning("%d fetches failed; affected data is missing", len(fetch_log.failures))

    logger.info(
        "Collection complete: %d repos, %d contributions, %d contributors",
        len(repos),
        org_report.stats.total_contributions,
        org_report.stats.total_contributors,
    )

    return OrgReportBundle(
        organization=source.organization,
        generated_at=window.as_of,
        org_report=org_report,
        repo_reports=repo_reports,
        repositories=[c.activity() for c in collections],
        fetch_failures=list(fetch_log.failures),
        pending_stats=list(fetch_log.pending_stats),
    )


async def collect_reports(
    config: Config,
    as_of: datetime | None = None,
    token: str | None = None,
) -> OrgReportBundle:
    """Single-pass collection and aggregation for the configured organization.

    Args:
        config: Application configuration.
        as_of: Reporting instant; defaults to ``config.resolve_as_of()``.
        token: Explicit GitHub token; read from the environment otherwise.

    Returns:
        OrgReportBundle for the run.

    Raises:
        AuthenticationError: If no token is available or GitHub rejects it.
        RateLimitExceeded: If the API rate limit runs out mid-run.
        CollectionError: If the repository list cannot be fetched.
    """
    start_time = datetime.now(UTC)
    window = ReportWindow(as_of=as_of or config.resolve_as_of(), days=config.window.days)

    auth = GitHubAuth(token=token, token_env=config.github.auth.token_env)
    async with GitHubClient(auth=auth, base_url=config.github.api_url) as http_client:
        rest_client = RestClient(http_client, per_page=config.collection.per_page)
        source = GitHubDataSource(rest_client, config.github.organization, config.collection)
        bundle = await collect_with_source(source, config, window)

        logger.info("API requests made: %d", http_client.rate_limit_state.requests_made)

    duration = (datetime.now(UTC) - start_time).total_seconds()
    logger.info("Total duration: %.2f seconds", duration)
    return bundle
