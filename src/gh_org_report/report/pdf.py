"""PDF summary of a report bundle, rendered with reportlab."""

import logging
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from gh_org_report.collect.orchestrator import OrgReportBundle
from gh_org_report.report.html import format_date, format_number

logger = logging.getLogger(__name__)

PDF_REPORT_FILE = "report.pdf"

_COLOR_GRID = colors.HexColor("#CBD5E1")
_COLOR_ROW_ALT = colors.HexColor("#F9FAFB")
_COLOR_HEADER_BG = colors.HexColor("#24292E")


def _styled_table(data: list[list[str]], numeric_cols: tuple[int, ...] = ()) -> Table:
    table = Table(data, repeatRows=1, hAlign="LEFT")
    commands: list[tuple] = [
        ("BACKGROUND", (0, 0), (-1, 0), _COLOR_HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, _COLOR_ROW_ALT]),
        ("BOX", (0, 0), (-1, -1), 0.6, _COLOR_GRID),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, _COLOR_GRID),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("RIGHTPADDING", (0, 0), (-1, -1), 6),
    ]
    for col in numeric_cols:
        commands.append(("ALIGN", (col, 0), (col, -1), "RIGHT"))
    table.setStyle(TableStyle(commands))
    return table


def write_pdf(bundle: OrgReportBundle, path: Path, title: str) -> Path:
    """Write a one-document PDF summary.

    Contains the organization totals, one row per repository
    (``Commits`` and ``+additions / -deletions``) and the top contributors.

    Args:
        bundle: Report bundle.
        path: Output file.
        title: Document title.

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    styles = getSampleStyleSheet()
    report = bundle.org_report
    stats = report.stats

    story: list = [
        Paragraph(escape(f"{title}: {bundle.organization}"), styles["Title"]),
        Paragraph(
            escape(
                f"{format_date(report.window_start)} to {format_date(report.window_end)}, "
                f"generated {format_date(bundle.generated_at)}"
            ),
            styles["Normal"],
        ),
        Spacer(1, 0.25 * inch),
        Paragraph("Summary", styles["Heading2"]),
        _styled_table(
            [
                ["Metric", "Value"],
                ["Commits", format_number(stats.total_commits)],
                ["Pull requests", format_number(stats.total_prs)],
                ["Issues", format_number(stats.total_issues)],
                ["Total contributions", format_number(stats.total_contributions)],
                ["Repositories", format_number(stats.total_repos)],
                ["Members", format_number(stats.total_members)],
                ["Active contributors", format_number(stats.total_contributors)],
            ],
            numeric_cols=(1,),
        ),
        Spacer(1, 0.25 * inch),
        Paragraph("Repositories", styles["Heading2"]),
    ]

    if bundle.repositories:
        rows = [["Repository", "Commits", "Code changes"]]
        rows.extend(
            [
                repo.name,
                format_number(repo.total_commits),
                f"+{format_number(repo.additions)} / -{format_number(repo.deletions)}",
            ]
            for repo in bundle.repositories
        )
        story.append(_styled_table(rows, numeric_cols=(1, 2)))
    else:
        story.append(Paragraph("No repositories.", styles["Normal"]))

    story.extend([Spacer(1, 0.25 * inch), Paragraph("Top Contributors", styles["Heading2"])])
    if report.top_contributors:
        rows = [["#", "Login", "Commits", "PRs", "Issues", "Total"]]
        rows.extend(
            [str(rank), c.login, str(c.commits), str(c.prs), str(c.issues), str(c.total)]
            for rank, c in enumerate(report.top_contributors, 1)
        )
        story.append(_styled_table(rows, numeric_cols=(2, 3, 4, 5)))
    else:
        story.append(Paragraph("No contributors in this period.", styles["Normal"]))

    doc = SimpleDocTemplate(
        str(path),
        pagesize=LETTER,
        title=f"{title} - {bundle.organization}",
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
    )
    doc.build(story)

    logger.info("Wrote PDF summary to %s", path)
    return path
