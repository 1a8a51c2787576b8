"""Models for parsed compiler diagnostics and their comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

Number = Union[int, float]


class Unit(Enum):
    """Unit tag inferred from the suffix of a diagnostics value."""

    SECONDS = "s"
    KILO = "K"
    NONE = ""

    @classmethod
    def from_value(cls, value: str) -> Unit:
        """Infer the unit from the trailing suffix of a raw value."""
        if value.endswith("s"):
            return cls.SECONDS
        if value.endswith("K"):
            return cls.KILO
        return cls.NONE


class Status(Enum):
    """Direction of change for a single metric."""

    INCREASED = "increased"
    DECREASED = "decreased"
    UNCHANGED = "unchanged"

    @property
    def glyph(self) -> str:
        """Glyph shown in rendered reports."""
        return _GLYPHS[self]


_GLYPHS = {
    Status.INCREASED: "▲",
    Status.DECREASED: "▼",
    Status.UNCHANGED: "±",
}


@dataclass(frozen=True)
class Measurement:
    """One compiler-reported metric.

    Attributes:
        name: Label as printed by the compiler (e.g., 'Check time')
        value: Numeric magnitude in the unit given by ``unit``
        unit: Unit tag inferred from the raw suffix
    """

    name: str
    value: Number
    unit: Unit = Unit.NONE

    def to_base(self) -> Number:
        """Value in the unit used for threshold comparison (ms for time)."""
        return normalize_to_millis(self.value, self.unit)

    def display(self) -> str:
        """Render value and unit the way the compiler prints them."""
        if self.unit is Unit.SECONDS:
            return f"{self.value:.2f}s"
        return f"{self.value}{self.unit.value}"


def normalize_to_millis(value: Number, unit: Unit) -> Number:
    """Convert a seconds-denominated value to milliseconds.

    Values in any other unit are returned unchanged.
    """
    if unit is Unit.SECONDS:
        return value * 1000
    return value


Snapshot = Mapping[str, Measurement]


def freeze_snapshot(measurements: dict[str, Measurement]) -> Snapshot:
    """Wrap parsed measurements in a read-only mapping."""
    return MappingProxyType(dict(measurements))


@dataclass(frozen=True)
class ComparisonRow:
    """Comparison of one metric between two snapshots.

    Attributes:
        name: Metric name
        previous: Measurement from the baseline run (zero if missing)
        current: Measurement from the current run (zero if missing)
        diff: current - previous, in the measurement's own unit
        percent_diff: diff relative to the current value, in percent
        status: Direction of change after threshold gating
        threshold_applied: Whether the metric is subject to time gating
        presence: 'both', 'added' (only in current) or 'removed' (only in previous)
    """

    name: str
    previous: Measurement
    current: Measurement
    diff: Number
    percent_diff: float
    status: Status
    threshold_applied: bool = False
    presence: str = "both"

    @property
    def unit(self) -> Unit:
        """Unit the diff is expressed in."""
        return self.current.unit if self.presence != "removed" else self.previous.unit


@dataclass
class Report:
    """Complete comparison of two diagnostics runs.

    Attributes:
        rows: Per-metric comparison rows in report order
        threshold_ms: Tolerance applied to time metrics, in milliseconds
    """

    rows: list[ComparisonRow] = field(default_factory=list)
    threshold_ms: float = 0

    def by_status(self, status: Status) -> list[ComparisonRow]:
        return [row for row in self.rows if row.status is status]

    @property
    def increased(self) -> list[ComparisonRow]:
        """Metrics that went up beyond tolerance."""
        return self.by_status(Status.INCREASED)

    @property
    def decreased(self) -> list[ComparisonRow]:
        """Metrics that went down beyond tolerance."""
        return self.by_status(Status.DECREASED)

    @property
    def unchanged(self) -> list[ComparisonRow]:
        """Metrics with no change or within tolerance."""
        return self.by_status(Status.UNCHANGED)

    def has_increases(self) -> bool:
        """Check if any metric increased."""
        return len(self.increased) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "threshold_ms": self.threshold_ms,
            "rows": [
                {
                    "metric": row.name,
                    "unit": row.unit.name.lower(),
                    "previous": row.previous.value,
                    "current": row.current.value,
                    "diff": row.diff,
                    "percent_diff": row.percent_diff,
                    "status": row.status.value,
                    "threshold_applied": row.threshold_applied,
                    "presence": row.presence,
                }
                for row in self.rows
            ],
            "summary": {
                "increased": len(self.increased),
                "decreased": len(self.decreased),
                "unchanged": len(self.unchanged),
            },
        }
