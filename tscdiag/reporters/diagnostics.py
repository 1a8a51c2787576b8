"""Reporter for diagnostics comparison results."""

from __future__ import annotations

import json
from io import StringIO

from rich.console import Console
from rich.table import Table

from tscdiag.diagnostics.models import ComparisonRow, Report, Status

DEFAULT_TITLE = "Comparing Diagnostics"

_STATUS_STYLES = {
    Status.INCREASED: "red",
    Status.DECREASED: "green",
    Status.UNCHANGED: "dim",
}


def format_change(row: ComparisonRow) -> str:
    """Glyph plus percent change, e.g. '▲ +20.00%'."""
    return f"{row.status.glyph} {row.percent_diff:+.2f}%"


def format_marker(marker: str) -> str:
    """Hidden HTML comment used to find a previously posted report."""
    return f"<!-- {marker} -->"


class DiagnosticsReporter:
    """Render a diagnostics Report as Markdown, JSON or a rich table."""

    name: str = "diagnostics"

    def __init__(self, title: str = DEFAULT_TITLE) -> None:
        self.title = title

    def emit(self, report: Report, output_format: str = "markdown", **options) -> str:
        """Render the report in the requested format.

        Args:
            report: Comparison result
            output_format: One of 'markdown', 'json', 'console'
            **options: Passed through to the markdown generator

        Returns:
            Rendered report
        """
        if output_format == "json":
            return self.generate_json_report(report)
        if output_format == "console":
            return self.generate_console_report(report)
        return self.generate_markdown_report(report, **options)

    def generate_markdown_report(
        self,
        report: Report,
        collapsible: bool = False,
        marker: str | None = None,
    ) -> str:
        """Generate Markdown output for PR comments.

        Args:
            report: Comparison result
            collapsible: Wrap the table in a <details> block
            marker: Hidden marker prepended to the body

        Returns:
            Markdown string
        """
        lines: list[str] = []

        if marker:
            lines.append(format_marker(marker))

        lines.append(f"## {self.title}")
        lines.append("")

        if collapsible:
            lines.append("<details>")
            lines.append(f"<summary>{self._summary_line(report)}</summary>")
            lines.append("")

        lines.append("| Metric | Previous | Current | Change |")
        lines.append("| --- | --- | --- | --- |")
        for row in report.rows:
            lines.append(
                f"| {row.name} | {row.previous.display()} | {row.current.display()} | {format_change(row)} |"
            )

        if collapsible:
            lines.append("")
            lines.append("</details>")

        return "\n".join(lines) + "\n"

    def generate_json_report(self, report: Report) -> str:
        """Generate JSON output."""
        return json.dumps(report.to_dict(), indent=2)

    def generate_console_report(self, report: Report) -> str:
        """Generate Rich table console output.

        Returns:
            Formatted string with ANSI styling
        """
        output = StringIO()
        console = Console(file=output, force_terminal=True, highlight=False)
        console.print(self.build_table(report))
        console.print(self._summary_line(report))
        return output.getvalue()

    def build_table(self, report: Report) -> Table:
        """Build the rich Table shown in terminals."""
        table = Table(title=self.title)
        table.add_column("Metric", style="cyan")
        table.add_column("Previous", justify="right")
        table.add_column("Current", justify="right")
        table.add_column("Change", justify="right")

        for row in report.rows:
            style = _STATUS_STYLES[row.status]
            table.add_row(
                row.name,
                row.previous.display(),
                row.current.display(),
                f"[{style}]{format_change(row)}[/{style}]",
            )
        return table

    def _summary_line(self, report: Report) -> str:
        return (
            f"{len(report.increased)} increased, {len(report.decreased)} decreased, "
            f"{len(report.unchanged)} unchanged (time threshold {report.threshold_ms:g}ms)"
        )


def render_markdown(
    report: Report,
    collapsible: bool = False,
    marker: str | None = None,
    title: str = DEFAULT_TITLE,
) -> str:
    """Render a report as a Markdown table."""
    return DiagnosticsReporter(title).generate_markdown_report(
        report, collapsible=collapsible, marker=marker
    )
