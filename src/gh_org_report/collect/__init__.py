"""Data collection from the GitHub REST API."""

from gh_org_report.collect.orchestrator import (
    CollectionError,
    OrgReportBundle,
    RepoActivity,
    collect_reports,
    collect_with_source,
)
from gh_org_report.collect.source import FetchFailure, FetchLog, GitHubDataSource

__all__ = [
    "CollectionError",
    "FetchFailure",
    "FetchLog",
    "GitHubDataSource",
    "OrgReportBundle",
    "RepoActivity",
    "collect_reports",
    "collect_with_source",
]
