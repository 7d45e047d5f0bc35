"""GitHub API client and authentication."""

from gh_org_report.github.auth import AuthenticationError, GitHubAuth
from gh_org_report.github.http import (
    GitHubClient,
    GitHubHTTPError,
    GitHubResponse,
    HTTPRateLimitState,
    RateLimitExceeded,
    RateLimitInfo,
)
from gh_org_report.github.rest import RestClient, parse_link_header

__all__ = [
    "AuthenticationError",
    "GitHubAuth",
    "GitHubClient",
    "GitHubHTTPError",
    "GitHubResponse",
    "HTTPRateLimitState",
    "RateLimitExceeded",
    "RateLimitInfo",
    "RestClient",
    "parse_link_header",
]
