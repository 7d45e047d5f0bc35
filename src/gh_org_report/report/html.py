"""HTML rendering of report bundles with Jinja2 templates.

Produces three kinds of pages:
    - contribution-report.html: organization calendar, stats and top contributors
    - activity-report.html: per-repository commit and code change charts
    - repo-contribution-reports/<repo>-contribution.html: one page per repository
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from gh_org_report.collect.orchestrator import OrgReportBundle
from gh_org_report.report.assembler import ContributionReport
from gh_org_report.report.transformers import (
    DAY_LABELS,
    activity_chart,
    calendar_grid,
    chart_series,
    month_labels,
    monthly_chart,
    safe_filename,
)

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

ORG_REPORT_FILE = "contribution-report.html"
ACTIVITY_REPORT_FILE = "activity-report.html"
REPO_REPORTS_DIR = "repo-contribution-reports"


def format_date(value: date | datetime | str | None) -> str:
    """Render a date as e.g. ``March 04, 2025``."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime("%B %d, %Y")


def format_number(value: int | float | None) -> str:
    """Render a number with thousands separators."""
    if value is None:
        return "0"
    try:
        if isinstance(value, float):
            return f"{value:,.1f}"
        return f"{int(value):,}"
    except (ValueError, TypeError):
        return str(value)


def create_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Jinja2 environment with the report filters registered."""
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_date"] = format_date
    env.filters["format_number"] = format_number
    return env


def repo_report_path(repo_name: str) -> str:
    """Path of a repository page, relative to the output directory."""
    return f"{REPO_REPORTS_DIR}/{safe_filename(repo_name)}-contribution.html"


def _scope_context(report: ContributionReport) -> dict[str, Any]:
    grid = calendar_grid(report.calendar)
    return {
        "report": report,
        "stats": report.stats,
        "calendar_weeks": grid,
        "calendar_months": month_labels(grid),
        "day_labels": DAY_LABELS,
        "monthly": monthly_chart(report.calendar),
        "weekly": chart_series(report.weekly_commits, report.weekly_code_changes),
        "contributors": report.top_contributors,
    }


def render_org_report(
    bundle: OrgReportBundle, title: str, env: Environment | None = None
) -> str:
    """Render the organization contribution page."""
    env = env or create_environment()
    template = env.get_template("org_report.html.j2")
    return template.render(
        title=title,
        organization=bundle.organization,
        generated_at=bundle.generated_at,
        fetch_failures=bundle.fetch_failures,
        repo_links=[(name, repo_report_path(name)) for name in bundle.repo_reports],
        **_scope_context(bundle.org_report),
    )


def render_repo_report(
    bundle: OrgReportBundle, repo_name: str, env: Environment | None = None
) -> str:
    """Render the contribution page of one repository.

    Raises:
        KeyError: If the bundle has no report for repo_name.
    """
    env = env or create_environment()
    report = bundle.repo_reports[repo_name]
    template = env.get_template("repo_report.html.j2")
    return template.render(
        organization=bundle.organization,
        repo_name=repo_name,
        generated_at=bundle.generated_at,
        **_scope_context(report),
    )


def render_activity_report(bundle: OrgReportBundle, env: Environment | None = None) -> str:
    """Render the repository activity page (totals and weekly charts)."""
    env = env or create_environment()
    template = env.get_template("activity_report.html.j2")

    repos = []
    for repo in bundle.repositories:
        report = bundle.repo_reports.get(repo.name)
        weekly = chart_series(report.weekly_commits, report.weekly_code_changes) if report else None
        has_data = weekly is not None and any(
            weekly["commits"] + weekly["additions"] + weekly["deletions"]
        )
        repos.append({"repo": repo, "weekly": weekly, "has_data": has_data})

    return template.render(
        organization=bundle.organization,
        generated_at=bundle.generated_at,
        overview=activity_chart(bundle.repositories),
        repos=repos,
        pending_stats=bundle.pending_stats,
    )


def write_html_reports(
    bundle: OrgReportBundle,
    output_dir: Path,
    title: str,
) -> list[Path]:
    """Render every HTML page of a bundle into output_dir.

    Args:
        bundle: Report bundle.
        output_dir: Directory for the pages (created if missing).
        title: Title of the organization page.

    Returns:
        Paths of the written files.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    env = create_environment()
    written: list[Path] = []

    org_path = output_dir / ORG_REPORT_FILE
    org_path.write_text(render_org_report(bundle, title, env), encoding="utf-8")
    written.append(org_path)

    activity_path = output_dir / ACTIVITY_REPORT_FILE
    activity_path.write_text(render_activity_report(bundle, env), encoding="utf-8")
    written.append(activity_path)

    for repo_name in bundle.repo_reports:
        path = output_dir / repo_report_path(repo_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_repo_report(bundle, repo_name, env), encoding="utf-8")
        written.append(path)

    logger.info("Wrote %d HTML pages to %s", len(written), output_dir)
    return written
