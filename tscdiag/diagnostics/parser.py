"""Parser for `tsc --diagnostics` / `--extendedDiagnostics` output."""

from __future__ import annotations

from tscdiag.diagnostics.models import Measurement, Number, Snapshot, Unit, freeze_snapshot
from tscdiag.exceptions import DiagnosticsParseError
from tscdiag.log import get_logger

logger = get_logger(__name__)


def parse_value(raw: str) -> tuple[Number, Unit]:
    """Parse a trimmed value segment into a number and its unit.

    Raises:
        ValueError: If the part before the unit suffix is not a number
    """
    unit = Unit.from_value(raw)
    if unit is Unit.SECONDS:
        return float(raw[:-1]), unit
    if unit is Unit.KILO:
        return int(raw[:-1]), unit
    return int(raw), unit


def parse_diagnostics(raw_text: str, strict: bool = True) -> Snapshot:
    """Convert raw compiler diagnostics into a snapshot.

    Only lines of the form ``<label>: <value>`` with exactly one colon are
    considered; headers, compiler errors and paths are skipped.

    Args:
        raw_text: Captured stdout of a compiler diagnostics run
        strict: Raise on values that are not numbers instead of skipping them

    Returns:
        Read-only mapping of metric name to Measurement, in input order

    Raises:
        DiagnosticsParseError: If ``strict`` and a metric value is not numeric
    """
    measurements: dict[str, Measurement] = {}

    for line_number, line in enumerate(raw_text.splitlines(), start=1):
        parts = line.split(":")
        if len(parts) != 2:
            continue

        name = parts[0].strip()
        raw_value = parts[1].strip()
        if not name or not raw_value:
            continue

        try:
            value, unit = parse_value(raw_value)
        except ValueError as e:
            if strict:
                raise DiagnosticsParseError(line_number, line) from e
            logger.debug("Skipping non-numeric diagnostics line %d: %r", line_number, line)
            continue

        measurements[name] = Measurement(name=name, value=value, unit=unit)

    return freeze_snapshot(measurements)
