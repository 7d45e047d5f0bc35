"""Normalization from GitHub payloads to contribution events.

Modules:
- records: raw REST payloads -> typed records
- events: typed records -> ContributionEvent
- identity: bot detection for rankings
"""

from gh_org_report.normalize.events import (
    normalize_all,
    normalize_commits,
    normalize_issues,
    normalize_pull_requests,
)
from gh_org_report.normalize.identity import BotDetectionResult, BotDetector
from gh_org_report.normalize.models import (
    EVENT_WEIGHTS,
    CodeFrequencyWeek,
    CommitRecord,
    ContributionEvent,
    EventKind,
    IssueRecord,
    Member,
    PullRequestRecord,
    Repository,
)

__all__ = [
    "EVENT_WEIGHTS",
    "BotDetectionResult",
    "BotDetector",
    "CodeFrequencyWeek",
    "CommitRecord",
    "ContributionEvent",
    "EventKind",
    "IssueRecord",
    "Member",
    "PullRequestRecord",
    "Repository",
    "normalize_all",
    "normalize_commits",
    "normalize_issues",
    "normalize_pull_requests",
]
