"""Diagnostics module - parsing and comparing compiler diagnostics."""

from tscdiag.diagnostics.comparator import Comparator, compare_diagnostics
from tscdiag.diagnostics.models import (
    ComparisonRow,
    Measurement,
    Report,
    Snapshot,
    Status,
    Unit,
)
from tscdiag.diagnostics.parser import parse_diagnostics

__all__ = [
    "Comparator",
    "ComparisonRow",
    "Measurement",
    "Report",
    "Snapshot",
    "Status",
    "Unit",
    "compare_diagnostics",
    "parse_diagnostics",
]
