"""GitHub REST API client with Link-header pagination.

Provides the listing endpoints the report needs. Listing methods are async
generators yielding one page at a time; a 404 (missing resource) and a 409
(empty repository) end the listing quietly, any other non-2xx status raises
``GitHubHTTPError``.
"""

import logging
import re
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import parse_qs, urlparse

from gh_org_report.github.http import GitHubClient, GitHubHTTPError, GitHubResponse

logger = logging.getLogger(__name__)

# Statuses that mean "nothing to list" rather than failure.
EMPTY_LISTING_STATUSES = (404, 409)


def parse_link_header(link_header: str | None) -> dict[str, str]:
    """Parse a Link header into a rel -> URL mapping.

    Args:
        link_header: Link header value from response.

    Returns:
        Dict mapping rel type to URL (e.g., {"next": "url", "last": "url"}).
    """
    if not link_header:
        return {}

    links = {}
    # <url>; rel="next", <url>; rel="last"
    for part in link_header.split(","):
        match = re.match(r'<([^>]+)>;\s*rel="([^"]+)"', part.strip())
        if match:
            url, rel = match.groups()
            links[rel] = url

    return links


def _page_number(url: str) -> int | None:
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


class RestClient:
    """GitHub REST API client."""

    def __init__(self, http_client: GitHubClient, per_page: int = 100) -> None:
        """Initialize REST API client.

        Args:
            http_client: GitHubClient instance for HTTP requests.
            per_page: Page size for listings (GitHub caps it at 100).
        """
        self._http = http_client
        self._per_page = per_page

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[list[Any]]:
        """Follow Link headers through a listing.

        Args:
            path: API endpoint path.
            params: Query parameters for the first page.
            max_pages: Optional cap on pages fetched.

        Yields:
            Items of each page.

        Raises:
            GitHubHTTPError: On a non-2xx status other than 404/409.
        """
        current_path = path
        current_params: dict[str, Any] | None = params
        page_num = 1

        while True:
            response: GitHubResponse = await self._http.get(current_path, params=current_params)

            if response.status_code in EMPTY_LISTING_STATUSES:
                logger.debug("Nothing to list (%d): %s", response.status_code, path)
                return

            if not response.is_success:
                msg = f"GET {path} failed with status {response.status_code}"
                raise GitHubHTTPError(msg)

            data = response.data
            if not isinstance(data, list):
                logger.warning("Unexpected payload for %s page %d, stopping", path, page_num)
                return
            if not data:
                return

            yield data

            links = parse_link_header(response.headers.get("link"))
            if "next" not in links:
                return
            if max_pages is not None and page_num >= max_pages:
                logger.debug("Reached page cap %d for %s", max_pages, path)
                return

            # The next URL already carries the full query string
            parsed = urlparse(links["next"])
            current_path = f"{parsed.path}?{parsed.query}" if parsed.query else parsed.path
            current_params = None
            page_num += 1

    async def list_org_repos(self, org: str) -> AsyncIterator[list[Any]]:
        """List repositories of an organization, most recently pushed first."""
        params = {"type": "all", "per_page": self._per_page, "sort": "pushed"}
        logger.info("Fetching repositories for org: %s", org)
        async for page in self._paginate(f"/orgs/{org}/repos", params):
            yield page

    async def list_org_members(self, org: str, max_pages: int | None = None) -> AsyncIterator[list[Any]]:
        """List members of an organization."""
        params = {"per_page": self._per_page}
        logger.info("Fetching members for org: %s", org)
        async for page in self._paginate(f"/orgs/{org}/members", params, max_pages):
            yield page

    async def list_commits(
        self,
        owner: str,
        repo: str,
        since: str | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[list[Any]]:
        """List commits of a repository's default branch.

        Args:
            owner: Repository owner.
            repo: Repository name.
            since: ISO 8601 timestamp; only commits after it are listed.
            max_pages: Optional cap on pages fetched.

        Yields:
            Pages of commit payloads.
        """
        params: dict[str, Any] = {"per_page": self._per_page}
        if since:
            params["since"] = since

        logger.debug("Fetching commits for %s/%s (since=%s)", owner, repo, since or "none")
        async for page in self._paginate(f"/repos/{owner}/{repo}/commits", params, max_pages):
            yield page

    async def list_pulls(
        self,
        owner: str,
        repo: str,
        state: str = "all",
        max_pages: int | None = None,
    ) -> AsyncIterator[list[Any]]:
        """List pull requests, newest first.

        The pulls endpoint has no ``since`` filter; callers filter on
        ``created_at`` and may stop once pages fall behind their window.
        """
        params = {
            "state": state,
            "per_page": self._per_page,
            "sort": "created",
            "direction": "desc",
        }
        logger.debug("Fetching pull requests for %s/%s (state=%s)", owner, repo, state)
        async for page in self._paginate(f"/repos/{owner}/{repo}/pulls", params, max_pages):
            yield page

    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "all",
        since: str | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[list[Any]]:
        """List issues (pull requests included) updated after since."""
        params: dict[str, Any] = {"state": state, "per_page": self._per_page}
        if since:
            params["since"] = since

        logger.debug("Fetching issues for %s/%s (since=%s)", owner, repo, since or "none")
        async for page in self._paginate(f"/repos/{owner}/{repo}/issues", params, max_pages):
            yield page

    async def get_code_frequency(self, owner: str, repo: str) -> GitHubResponse:
        """Fetch weekly additions/deletions statistics.

        GitHub answers 202 while it computes the statistics and 204 when
        there is nothing to report; the raw response is returned so callers
        can tell those apart.
        """
        return await self._http.get(f"/repos/{owner}/{repo}/stats/code_frequency")

    async def count_commits(self, owner: str, repo: str) -> int:
        """Count all commits on the default branch.

        Lists one commit per page and reads the page number of the
        ``rel="last"`` link.

        Returns:
            Total commit count; 0 for an empty or missing repository.

        Raises:
            GitHubHTTPError: On an unexpected status.
        """
        response = await self._http.get(f"/repos/{owner}/{repo}/commits", params={"per_page": 1})

        if response.status_code in EMPTY_LISTING_STATUSES:
            return 0
        if not response.is_success:
            msg = f"Counting commits of {owner}/{repo} failed with status {response.status_code}"
            raise GitHubHTTPError(msg)

        links = parse_link_header(response.headers.get("link"))
        if "last" in links:
            last_page = _page_number(links["last"])
            if last_page is not None:
                return last_page

        return len(response.data) if isinstance(response.data, list) else 0

    async def get_user(self, login: str) -> dict[str, Any] | None:
        """Fetch a public user profile, or None if it cannot be read."""
        response = await self._http.get(f"/users/{login}")
        if response.is_success and isinstance(response.data, dict):
            return response.data
        logger.debug("Could not fetch user %s: %d", login, response.status_code)
        return None
