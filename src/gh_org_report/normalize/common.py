"""Common helpers shared by the record parsers and normalizers."""

import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

TITLE_MAX_LEN = 50


def normalize_timestamp(ts: str | datetime | None) -> datetime | None:
    """Normalize a GitHub API timestamp to an aware UTC datetime.

    Handles GitHub's ISO 8601 timestamps (e.g., "2025-01-15T10:30:00Z") and
    datetimes that are already parsed. Naive values are taken to be UTC.

    Args:
        ts: ISO 8601 timestamp string, datetime or None.

    Returns:
        UTC datetime object or None if input is None or invalid.
    """
    if ts is None:
        return None

    if isinstance(ts, datetime):
        dt = ts
    else:
        try:
            dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
        except (ValueError, AttributeError) as e:
            logger.warning("Failed to parse timestamp '%s': %s", ts, e)
            return None

    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def get_login(user_dict: dict[str, Any] | None) -> str | None:
    """Extract a login from a GitHub user object.

    Args:
        user_dict: User dictionary from GitHub API (may be null on
            commits whose author email is not linked to an account).

    Returns:
        Login or None.
    """
    if not isinstance(user_dict, dict):
        return None
    login = user_dict.get("login")
    return login if isinstance(login, str) and login else None


def short_text(text: Any, limit: int = TITLE_MAX_LEN) -> str:
    """First line of text, cut to limit characters."""
    if not isinstance(text, str):
        return ""
    first_line = text.splitlines()[0] if text else ""
    return first_line[:limit]
