"""CLI entry point for gh-org-report.

Commands:
- collect: Fetch organization activity and write the report bundle JSON
- build: Render HTML and PDF reports from the bundle
- all: Both in sequence
"""

import asyncio
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from gh_org_report import __version__
from gh_org_report.config import Config, load_config
from gh_org_report.logging import setup_logging
from gh_org_report.report.export import BUNDLE_FILE

console = Console()

CONFIG_OPTION = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to config.yaml file",
)
AS_OF_OPTION = click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Reference date of the trailing window, in UTC (default: now)",
)


def _fail(ctx: click.Context, message: str, error: Exception) -> NoReturn:
    console.print(f"\n[bold red]{message}:[/bold red] {escape(str(error))}")
    if ctx.obj.get("verbose"):
        console.print("\n[dim]Traceback:[/dim]")
        console.print(traceback.format_exc())
    raise click.Abort() from error


def _load(ctx: click.Context, config: Path) -> Config:
    try:
        return load_config(config)
    except Exception as e:
        _fail(ctx, "Invalid configuration", e)


@click.group()
@click.version_option(version=__version__, prog_name="gh-org-report")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option("--log-json", is_flag=True, default=False, help="Emit log records as JSON lines")
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_json: bool) -> None:
    """GitHub organization contribution report generator.

    Builds a trailing-year contribution calendar, weekly commit and code
    change charts, and contributor rankings for an organization and each of
    its repositories.

    \b
    Quick Start:
        1. Collect data: gh-org-report collect --config config.yaml
        2. Render reports: gh-org-report build --config config.yaml
        3. Or run both: gh-org-report all --config config.yaml
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose, json_format=log_json)


@main.command()
@CONFIG_OPTION
@AS_OF_OPTION
@click.pass_context
def collect(ctx: click.Context, config: Path, as_of: datetime | None) -> None:
    """Fetch organization activity and write the report bundle.

    Output: <report.output_dir>/report.json
    """
    from gh_org_report.collect.orchestrator import collect_reports
    from gh_org_report.report.export import write_bundle

    cfg = _load(ctx, config)
    reference = as_of.replace(tzinfo=UTC) if as_of else cfg.resolve_as_of()

    console.print(
        f"[bold]Collecting {cfg.github.organization} "
        f"({cfg.window.days} days to {reference.date().isoformat()})[/bold]"
    )

    try:
        bundle = asyncio.run(collect_reports(cfg, as_of=reference))
        path = write_bundle(bundle, cfg.report.output_dir / BUNDLE_FILE)
    except KeyboardInterrupt:
        console.print("\n[yellow]Collection interrupted by user[/yellow]")
        raise click.Abort() from None
    except Exception as e:
        _fail(ctx, "Error", e)

    stats = bundle.org_report.stats
    console.print()
    console.print("[bold green]Collection complete![/bold green]")
    console.print(f"  Repositories: {stats.total_repos}")
    console.print(
        f"  Commits: {stats.total_commits}  PRs: {stats.total_prs}  Issues: {stats.total_issues}"
    )
    console.print(f"  Total contributions: {stats.total_contributions}")
    console.print(f"  Output: {path}")

    if bundle.fetch_failures:
        console.print(f"\n[yellow]Warnings:[/yellow] {len(bundle.fetch_failures)} fetches failed")
        for failure in bundle.fetch_failures[:5]:
            scope = failure.repo or "organization"
            console.print(f"  - {scope} {failure.endpoint}: {escape(failure.message)}")
    if bundle.pending_stats:
        console.print(
            f"[yellow]Statistics still computing for:[/yellow] {', '.join(bundle.pending_stats)}"
        )


@main.command()
@CONFIG_OPTION
@click.pass_context
def build(ctx: click.Context, config: Path) -> None:
    """Render HTML and PDF reports from the bundle written by 'collect'."""
    from gh_org_report.report.export import load_bundle
    from gh_org_report.report.html import write_html_reports
    from gh_org_report.report.pdf import PDF_REPORT_FILE, write_pdf

    cfg = _load(ctx, config)
    output_dir = cfg.report.output_dir
    bundle_path = output_dir / BUNDLE_FILE

    if not bundle_path.exists():
        console.print(f"[bold red]Error:[/bold red] No report bundle found at {bundle_path}")
        console.print("[yellow]Run 'collect' command first[/yellow]")
        raise click.Abort()

    console.print(f"[bold]Building reports for {cfg.github.organization}[/bold]")

    written: list[Path] = []
    try:
        bundle = load_bundle(bundle_path)
        if cfg.report.html:
            written.extend(write_html_reports(bundle, output_dir, cfg.report.title))
        if cfg.report.pdf:
            written.append(write_pdf(bundle, output_dir / PDF_REPORT_FILE, cfg.report.title))
    except Exception as e:
        _fail(ctx, "Build failed", e)

    console.print()
    console.print("[bold green]Reports built successfully![/bold green]")
    for path in written:
        console.print(f"  ✓ {path}")


@main.command(name="all")
@CONFIG_OPTION
@AS_OF_OPTION
@click.pass_context
def run_all(ctx: click.Context, config: Path, as_of: datetime | None) -> None:
    """Collect data and build reports in one go.

    Equivalent to:

        gh-org-report collect --config CONFIG
        gh-org-report build --config CONFIG
    """
    console.print("[bold]Running complete pipeline[/bold]\n")
    ctx.invoke(collect, config=config, as_of=as_of)
    console.print()
    ctx.invoke(build, config=config)
    console.print("\n[bold green]Pipeline complete![/bold green]")


if __name__ == "__main__":
    main()
