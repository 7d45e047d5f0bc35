"""Logging setup with token scrubbing."""

import logging
import re
from typing import ClassVar


class SecretRedactingFilter(logging.Filter):
    """Scrub GitHub credentials from log records before they are emitted."""

    SECRET_PATTERNS: ClassVar[list[tuple[re.Pattern[str], str]]] = [
        (re.compile(r"gh[pousr]_[a-zA-Z0-9]{20,}"), "[REDACTED_GH_TOKEN]"),
        (re.compile(r"github_pat_[a-zA-Z0-9_]+"), "[REDACTED_GH_PAT]"),
        (re.compile(r"(Bearer|token)\s+[a-zA-Z0-9_\-\.]{8,}"), r"\1 [REDACTED]"),
        (re.compile(r"(Authorization:\s*)[^\s,\]]+", re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the message and any string arguments."""
        record.msg = self.redact(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    def redact(self, text: str) -> str:
        """Replace every known secret shape in text."""
        for pattern, replacement in self.SECRET_PATTERNS:
            text = pattern.sub(replacement, text)
        return text


def setup_logging(verbose: bool = False, json_format: bool = False) -> None:
    """Configure root logging for a CLI run.

    Args:
        verbose: Enable debug level logging.
        json_format: Emit one JSON object per line.
    """
    level = logging.DEBUG if verbose else logging.INFO

    if json_format:
        format_str = (
            '{"time": "%(asctime)s", "level": "%(levelname)s", '
            '"name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        format_str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    redaction_filter = SecretRedactingFilter()
    for handler in logging.getLogger().handlers:
        handler.addFilter(redaction_filter)

    # Library chatter
    for noisy in ("httpx", "httpcore", "reportlab"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
