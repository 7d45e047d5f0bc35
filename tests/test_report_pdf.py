"""Tests for the PDF summary."""

from pathlib import Path

from gh_org_report.collect.orchestrator import OrgReportBundle
from gh_org_report.report.pdf import PDF_REPORT_FILE, write_pdf


class TestWritePdf:
    """Tests for write_pdf."""

    def test_writes_pdf(self, bundle: OrgReportBundle, tmp_path: Path) -> None:
        """A PDF document is written, creating parent directories."""
        path = write_pdf(bundle, tmp_path / "nested" / PDF_REPORT_FILE, "Contribution Report")

        assert path.exists()
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_bundle(self, bundle: OrgReportBundle, tmp_path: Path) -> None:
        """Bundles without repositories or contributors still render."""
        empty = bundle.model_copy(
            update={
                "repositories": [],
                "org_report": bundle.org_report.model_copy(update={"top_contributors": ()}),
            }
        )

        path = write_pdf(empty, tmp_path / PDF_REPORT_FILE, "Report")

        assert path.stat().st_size > 0
