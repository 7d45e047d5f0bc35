"""GitHub token loading.

The token comes from an explicit value or from the environment variable named
in the configuration. No interactive or OAuth flow is supported.
"""

import logging
import os

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when no usable token is available or GitHub rejects it."""


class GitHubAuth:
    """Holds the token used for GitHub API requests."""

    def __init__(self, token: str | None = None, token_env: str = "GITHUB_TOKEN") -> None:
        """Initialize GitHub authentication.

        Args:
            token: GitHub token. If None, read from token_env.
            token_env: Name of the environment variable holding the token.

        Raises:
            AuthenticationError: If the token is missing or malformed.
        """
        if token:
            source = "explicit parameter"
        else:
            token = os.environ.get(token_env, "")
            source = f"{token_env} environment variable"

        token = token.strip()
        if not token:
            raise AuthenticationError(
                f"GitHub token not found. Set the {token_env} environment variable "
                "or pass a token explicitly."
            )
        if any(ch.isspace() for ch in token):
            raise AuthenticationError("GitHub token must not contain whitespace")

        logger.info("Using GitHub token from %s", source)
        self._token = token

    @property
    def token(self) -> str:
        """The GitHub token."""
        return self._token

    def get_authorization_header(self) -> dict[str, str]:
        """Authorization header for API requests."""
        return {"Authorization": f"Bearer {self._token}"}
