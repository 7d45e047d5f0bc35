"""JSON export of report bundles.

The bundle written by ``collect`` is the input of ``build``, so rendering can
be repeated without hitting the API again.
"""

import json
import logging
from pathlib import Path

from gh_org_report.collect.orchestrator import OrgReportBundle

logger = logging.getLogger(__name__)

BUNDLE_FILE = "report.json"


def write_bundle(bundle: OrgReportBundle, path: Path) -> Path:
    """Write a bundle as indented JSON.

    Args:
        bundle: Report bundle.
        path: Output file path (parent directories are created).

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(bundle.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    logger.info("Wrote report bundle to %s", path)
    return path


def load_bundle(path: Path) -> OrgReportBundle:
    """Load a bundle written by write_bundle.

    Raises:
        FileNotFoundError: If path does not exist.
        ValidationError: If the file is not a valid bundle.
    """
    if not path.exists():
        msg = f"Report bundle not found: {path}. Run 'collect' first."
        raise FileNotFoundError(msg)

    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return OrgReportBundle.model_validate(data)
