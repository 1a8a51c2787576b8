"""tscdiag CLI - compare TypeScript compiler diagnostics between branches."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from tscdiag import __version__
from tscdiag.config import build_config
from tscdiag.diagnostics import compare_diagnostics, parse_diagnostics
from tscdiag.diagnostics.comparator import DEFAULT_THRESHOLD_MS
from tscdiag.exceptions import TscDiagError
from tscdiag.log import init_logging
from tscdiag.orchestrator import DiagnosticsRun
from tscdiag.reporters import DiagnosticsReporter

console = Console()
error_console = Console(stderr=True)

FORMATS = ["console", "json", "markdown"]


def _write_report(report_text: str, output: str | None, output_format: str) -> None:
    if output:
        Path(output).write_text(report_text, encoding="utf-8")
        error_console.print(f"Report written to: {output}")
    elif output_format == "console":
        # Already rendered with ANSI styling
        sys.stdout.write(report_text)
    else:
        print(report_text)


def _read_diagnostics(path: str) -> str:
    # Compiler output may carry bytes from the host locale
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _exit_for(has_increases: bool, fail_on_increase: bool) -> None:
    if fail_on_increase and has_increases:
        error_console.print("[red]✗ Diagnostics increased[/red]")
        sys.exit(1)
    sys.exit(0)


@click.group()
@click.version_option(version=__version__, prog_name="tscdiag")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """tscdiag - TypeScript compiler diagnostics diff for pull requests.

    Measures check time, memory and instantiation counts on the PR and on
    the base branch and reports what changed.
    """
    init_logging(verbose)


@main.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with options (default: .tscdiag.yaml if present)",
)
@click.option("--base-branch", "-b", envvar="TSCDIAG_BASE_BRANCH", help="Branch to compare against")
@click.option(
    "--threshold",
    "-t",
    type=float,
    envvar="TSCDIAG_THRESHOLD",
    help=f"Tolerance for time metrics in ms (default: {DEFAULT_THRESHOLD_MS})",
)
@click.option("--flags", envvar="TSCDIAG_FLAGS", help="Extra tsc flags")
@click.option(
    "--command",
    "custom_command",
    envvar="TSCDIAG_COMMAND",
    help="Command to run instead of tsc; must print compiler diagnostics",
)
@click.option(
    "--extended/--no-extended",
    default=None,
    help="Use --extendedDiagnostics (default) or --diagnostics",
)
@click.option("--install/--no-install", default=None, help="Install dependencies before measuring")
@click.option(
    "--comment/--no-comment",
    default=None,
    envvar="TSCDIAG_COMMENT",
    help="Post (or update) the report as a pull request comment",
)
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token used for commenting")
@click.option("--pr-url", help="Pull request to comment on (auto-detected in GitHub Actions)")
@click.option("--working-dir", "-C", type=click.Path(exists=True, file_okay=False), help="Project directory")
@click.option("--timeout", type=float, help="Timeout in seconds for each external command")
@click.option("--format", "-f", "output_format", type=click.Choice(FORMATS), default="markdown", help="Output format")
@click.option("--output", "-o", type=click.Path(), help="Write report to file")
@click.option("--fail-on-increase", is_flag=True, help="Exit with code 1 if any metric increased")
def run(
    config_path: str | None,
    base_branch: str | None,
    threshold: float | None,
    flags: str | None,
    custom_command: str | None,
    extended: bool | None,
    install: bool | None,
    comment: bool | None,
    token: str | None,
    pr_url: str | None,
    working_dir: str | None,
    timeout: float | None,
    output_format: str,
    output: str | None,
    fail_on_increase: bool,
) -> None:
    """Compare diagnostics of the current checkout against a base branch.

    Runs tsc on the current checkout, checks out the base branch, runs tsc
    again, restores the original checkout and prints the difference.
    """
    try:
        config = build_config(
            config_path,
            reporting_enabled=comment,
            base_branch=base_branch,
            threshold_ms=threshold,
            flags=flags,
            custom_command=custom_command,
            extended_diagnostics=extended,
            install_dependencies=install,
            access_token=token,
            working_dir=working_dir,
            command_timeout=timeout,
        )

        result = DiagnosticsRun(config).execute(pr_url)

        if output_format == "markdown":
            report_text = result.markdown
        else:
            report_text = DiagnosticsReporter().emit(result.report, output_format)
        _write_report(report_text, output, output_format)

        if result.comment_url:
            error_console.print(f"[green]✓[/green] Comment posted: {result.comment_url}")

    except TscDiagError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    _exit_for(result.report.has_increases(), fail_on_increase)


@main.command()
@click.argument("previous", type=click.Path(exists=True, dir_okay=False))
@click.argument("current", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--threshold",
    "-t",
    type=float,
    default=DEFAULT_THRESHOLD_MS,
    show_default=True,
    help="Tolerance for time metrics in ms",
)
@click.option("--format", "-f", "output_format", type=click.Choice(FORMATS), default="markdown", help="Output format")
@click.option("--collapsible", is_flag=True, help="Wrap the Markdown table in a <details> block")
@click.option("--lenient", is_flag=True, help="Skip non-numeric values instead of failing")
@click.option("--output", "-o", type=click.Path(), help="Write report to file")
@click.option("--fail-on-increase", is_flag=True, help="Exit with code 1 if any metric increased")
def compare(
    previous: str,
    current: str,
    threshold: float,
    output_format: str,
    collapsible: bool,
    lenient: bool,
    output: str | None,
    fail_on_increase: bool,
) -> None:
    """Compare two saved diagnostics outputs.

    PREVIOUS and CURRENT are files holding the stdout of
    `tsc --extendedDiagnostics`.
    """
    try:
        previous_snapshot = parse_diagnostics(
            _read_diagnostics(previous), strict=not lenient
        )
        current_snapshot = parse_diagnostics(
            _read_diagnostics(current), strict=not lenient
        )
    except TscDiagError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    report = compare_diagnostics(previous_snapshot, current_snapshot, threshold)
    report_text = DiagnosticsReporter().emit(report, output_format, collapsible=collapsible)
    _write_report(report_text, output, output_format)

    _exit_for(report.has_increases(), fail_on_increase)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
@click.option("--lenient", is_flag=True, help="Skip non-numeric values instead of failing")
def parse(path: str, as_json: bool, lenient: bool) -> None:
    """Show the metrics tscdiag reads from a diagnostics output file."""
    try:
        snapshot = parse_diagnostics(_read_diagnostics(path), strict=not lenient)
    except TscDiagError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    if as_json:
        data = {
            name: {"value": m.value, "unit": m.unit.name.lower()}
            for name, m in snapshot.items()
        }
        print(json.dumps(data, indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit", style="dim")
    for name, measurement in snapshot.items():
        table.add_row(name, measurement.display(), measurement.unit.name.lower())
    console.print(table)


if __name__ == "__main__":
    main()
