"""Bot detection for contributor rankings."""

import re
from dataclasses import dataclass

from gh_org_report.config import BotConfig


@dataclass
class BotDetectionResult:
    """Result of bot detection.

    Attributes:
        is_bot: Whether the login is classified as a bot.
        reason: Explanation for bot classification. None if human.
    """

    is_bot: bool
    reason: str | None


class BotDetector:
    """Classifies logins as bots from configured patterns and overrides.

    Rules, in order:
    1. A login listed in include_overrides is human.
    2. A login matching any exclude pattern is a bot.
    3. Anything else is human.
    """

    def __init__(self, exclude_patterns: list[str], include_overrides: list[str]) -> None:
        self.exclude_patterns = [re.compile(pattern) for pattern in exclude_patterns]
        self.include_overrides = set(include_overrides)

    @classmethod
    def from_config(cls, config: BotConfig) -> "BotDetector":
        """Build a detector from the identity.bots config section."""
        return cls(config.exclude_patterns, config.include_overrides)

    def detect(self, login: str) -> BotDetectionResult:
        """Classify a login.

        Args:
            login: GitHub login.

        Returns:
            BotDetectionResult with is_bot flag and optional reason.
        """
        if login in self.include_overrides:
            return BotDetectionResult(is_bot=False, reason=None)

        for pattern in self.exclude_patterns:
            if pattern.match(login):
                return BotDetectionResult(is_bot=True, reason=f"matches pattern: {pattern.pattern}")

        return BotDetectionResult(is_bot=False, reason=None)

    def is_bot(self, login: str) -> bool:
        """Shorthand for ``detect(login).is_bot``, usable as a ranking filter."""
        return self.detect(login).is_bot
