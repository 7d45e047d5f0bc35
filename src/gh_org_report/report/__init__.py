"""Report assembly and rendering (HTML, PDF, JSON)."""

from gh_org_report.report.assembler import (
    ContributionReport,
    ReportAssemblyError,
    ReportStats,
    assemble_report,
    build_scope_report,
)

__all__ = [
    "ContributionReport",
    "ReportAssemblyError",
    "ReportStats",
    "assemble_report",
    "build_scope_report",
]
