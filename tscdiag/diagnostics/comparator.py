"""Comparator for diagnostics snapshots."""

from __future__ import annotations

import math

from tscdiag.diagnostics.models import (
    ComparisonRow,
    Measurement,
    Number,
    Report,
    Snapshot,
    Status,
    normalize_to_millis,
)

DEFAULT_THRESHOLD_MS = 300


def is_time_metric(name: str) -> bool:
    """Time metrics are gated by the threshold; everything else is not."""
    return "time" in name.lower()


def percent_change(diff: Number, current: Number) -> float:
    """Diff relative to the current value, in percent (0 when undefined)."""
    if current == 0:
        return 0.0
    percent = diff / current * 100
    if math.isnan(percent):
        return 0.0
    return percent


class Comparator:
    """Compares a baseline snapshot against the current one.

    Every metric is classified as increased, decreased or unchanged.
    Metrics whose name mentions "time" are treated as unchanged while the
    absolute change stays within ``threshold_ms``.
    """

    def __init__(self, threshold_ms: float = DEFAULT_THRESHOLD_MS) -> None:
        """Initialize comparator.

        Args:
            threshold_ms: Tolerance for time metrics, in milliseconds
        """
        self.threshold_ms = threshold_ms

    def compare(self, previous: Snapshot, current: Snapshot) -> Report:
        """Compare current diagnostics against the baseline.

        Rows follow the current snapshot's order; metrics that only exist
        in the baseline are appended at the end.

        Returns:
            Report with one row per metric
        """
        names = list(current)
        names.extend(name for name in previous if name not in current)

        rows = [self._compare_metric(name, previous.get(name), current.get(name)) for name in names]
        return Report(rows=rows, threshold_ms=self.threshold_ms)

    def _compare_metric(
        self,
        name: str,
        previous: Measurement | None,
        current: Measurement | None,
    ) -> ComparisonRow:
        if previous is None:
            presence = "added"
            previous = Measurement(name, 0, current.unit)
        elif current is None:
            presence = "removed"
            current = Measurement(name, 0, previous.unit)
        else:
            presence = "both"

        diff = current.value - previous.value
        gated = is_time_metric(name)

        return ComparisonRow(
            name=name,
            previous=previous,
            current=current,
            diff=diff,
            percent_diff=percent_change(diff, current.value),
            status=self._get_status(diff, current, gated),
            threshold_applied=gated,
            presence=presence,
        )

    def _get_status(self, diff: Number, current: Measurement, gated: bool) -> Status:
        if diff == 0:
            return Status.UNCHANGED
        if gated and abs(normalize_to_millis(diff, current.unit)) <= self.threshold_ms:
            return Status.UNCHANGED
        if diff > 0:
            return Status.INCREASED
        return Status.DECREASED


def compare_diagnostics(
    previous: Snapshot,
    current: Snapshot,
    threshold_ms: float = DEFAULT_THRESHOLD_MS,
) -> Report:
    """Compare two snapshots with the given time tolerance."""
    return Comparator(threshold_ms).compare(previous, current)
