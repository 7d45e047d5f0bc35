"""Async GitHub HTTP client.

Thin wrapper over httpx that authenticates requests, decodes JSON and tracks
rate limit headers. Requests are not retried: a transport failure raises
``GitHubHTTPError`` and an exhausted rate limit raises ``RateLimitExceeded``
for the caller to surface.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from gh_org_report import __version__
from gh_org_report.github.auth import AuthenticationError, GitHubAuth

logger = logging.getLogger(__name__)


class RateLimitInfo(BaseModel):
    """GitHub API rate limit information from response headers."""

    limit: int
    remaining: int
    reset: datetime
    used: int
    resource: str = "core"

    @classmethod
    def from_headers(cls, headers: httpx.Headers) -> Optional["RateLimitInfo"]:
        """Extract rate limit info from response headers.

        Args:
            headers: HTTP response headers.

        Returns:
            RateLimitInfo if headers present, None otherwise.
        """
        if "x-ratelimit-limit" not in headers:
            return None

        reset_timestamp = int(headers.get("x-ratelimit-reset", "0"))

        return cls(
            limit=int(headers.get("x-ratelimit-limit", "0")),
            remaining=int(headers.get("x-ratelimit-remaining", "0")),
            reset=datetime.fromtimestamp(reset_timestamp, tz=UTC),
            used=int(headers.get("x-ratelimit-used", "0")),
            resource=headers.get("x-ratelimit-resource", "core"),
        )


@dataclass
class GitHubResponse:
    """GitHub API response with decoded body and metadata."""

    status_code: int
    data: Any
    headers: httpx.Headers
    rate_limit: RateLimitInfo | None = None
    url: str = ""

    @property
    def is_success(self) -> bool:
        """Check if response was successful (2xx status code)."""
        return 200 <= self.status_code < 300


@dataclass
class HTTPRateLimitState:
    """Tracks rate limit state across requests."""

    last_rate_limit: RateLimitInfo | None = None
    last_check: datetime = field(default_factory=lambda: datetime.now(UTC))
    requests_made: int = 0

    def update(self, rate_limit: RateLimitInfo | None) -> None:
        """Record one request and the latest rate limit snapshot."""
        self.requests_made += 1
        if rate_limit:
            self.last_rate_limit = rate_limit
            self.last_check = datetime.now(UTC)
            if rate_limit.remaining < rate_limit.limit // 10:
                logger.warning(
                    "Rate limit running low: %d/%d remaining, resets %s",
                    rate_limit.remaining,
                    rate_limit.limit,
                    rate_limit.reset.isoformat(),
                )


class GitHubHTTPError(Exception):
    """Base exception for GitHub HTTP errors."""


class RateLimitExceeded(GitHubHTTPError):
    """Raised when the rate limit is exhausted."""

    def __init__(self, reset_at: datetime) -> None:
        self.reset_at = reset_at
        super().__init__(f"Rate limit exceeded. Resets at {reset_at.isoformat()}")


class GitHubClient:
    """Async HTTP client for the GitHub REST API."""

    BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        auth: GitHubAuth,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize GitHub HTTP client.

        Args:
            auth: GitHubAuth instance.
            timeout: Request timeout in seconds.
            base_url: Base URL for GitHub API.
        """
        self._auth = auth
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

        self._client: httpx.AsyncClient | None = None
        self._rate_limit_state = HTTPRateLimitState()

    @property
    def rate_limit_state(self) -> HTTPRateLimitState:
        """Current rate limit tracking state."""
        return self._rate_limit_state

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"gh-org-report/{__version__}",
        }
        headers.update(self._auth.get_authorization_header())
        return headers

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._get_headers(),
                follow_redirects=True,
            )
        return self._client

    async def request(self, method: str, path: str, **kwargs: Any) -> GitHubResponse:
        """Make an HTTP request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: API path (e.g., "/orgs/acme/repos"), optionally with a
                query string.
            **kwargs: Additional arguments passed to httpx (params, etc.).

        Returns:
            GitHubResponse with decoded data. A body that is not JSON is
            returned as text.

        Raises:
            AuthenticationError: If GitHub rejects the token (401).
            RateLimitExceeded: If the rate limit is exhausted.
            GitHubHTTPError: On timeouts and network failures.
        """
        client = await self._ensure_client()
        logger.debug("%s %s", method, path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise GitHubHTTPError(f"Request timeout for {method} {path}: {e}") from e
        except httpx.HTTPError as e:
            raise GitHubHTTPError(f"Network error for {method} {path}: {e}") from e

        rate_limit = RateLimitInfo.from_headers(response.headers)
        self._rate_limit_state.update(rate_limit)

        if response.status_code == 401:
            raise AuthenticationError("GitHub rejected the token (401 Bad credentials)")

        if (
            response.status_code in (403, 429)
            and rate_limit is not None
            and rate_limit.remaining == 0
        ):
            raise RateLimitExceeded(reset_at=rate_limit.reset)

        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError as e:
                logger.warning("Failed to parse JSON response from %s: %s", path, e)
                data = response.text

        return GitHubResponse(
            status_code=response.status_code,
            data=data,
            headers=response.headers,
            rate_limit=rate_limit,
            url=str(response.url),
        )

    async def get(self, path: str, **kwargs: Any) -> GitHubResponse:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
