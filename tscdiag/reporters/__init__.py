"""Reporters module - output formatting for comparison reports."""

from tscdiag.reporters.diagnostics import DiagnosticsReporter, render_markdown

__all__ = [
    "DiagnosticsReporter",
    "render_markdown",
]
