"""Tests for bundle JSON export."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from gh_org_report.collect.orchestrator import OrgReportBundle
from gh_org_report.report.export import BUNDLE_FILE, load_bundle, write_bundle


class TestBundleExport:
    """Tests for write_bundle and load_bundle."""

    def test_round_trip(self, bundle: OrgReportBundle, tmp_path: Path) -> None:
        """A written bundle loads back equal."""
        path = write_bundle(bundle, tmp_path / "data" / BUNDLE_FILE)

        assert load_bundle(path) == bundle

    def test_json_layout(self, bundle: OrgReportBundle, tmp_path: Path) -> None:
        """The file is plain JSON with ISO dates."""
        path = write_bundle(bundle, tmp_path / BUNDLE_FILE)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["organization"] == "acme"
        assert data["org_report"]["window_start"] == "2024-06-15"
        assert data["org_report"]["stats"]["total_contributions"] == 4
        assert set(data["repo_reports"]) == {"api", "web-app"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Loading a missing bundle points at collect."""
        with pytest.raises(FileNotFoundError, match="collect"):
            load_bundle(tmp_path / BUNDLE_FILE)

    def test_invalid_file(self, tmp_path: Path) -> None:
        """Files that are not bundles fail validation."""
        path = tmp_path / BUNDLE_FILE
        path.write_text('{"organization": "acme"}', encoding="utf-8")
        with pytest.raises(ValidationError):
            load_bundle(path)
