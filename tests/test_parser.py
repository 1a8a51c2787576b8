from __future__ import annotations

import pytest

from tscdiag.diagnostics import Unit, parse_diagnostics
from tscdiag.diagnostics.models import Measurement, normalize_to_millis
from tscdiag.diagnostics.parser import parse_value
from tscdiag.exceptions import DiagnosticsParseError


def test_parse_plain_seconds_and_kilo_values() -> None:
    snapshot = parse_diagnostics("Files: 42\nCheck time: 1.23s\nMemory used: 65536K\n")

    assert snapshot["Files"] == Measurement("Files", 42, Unit.NONE)
    assert isinstance(snapshot["Files"].value, int)
    assert snapshot["Check time"] == Measurement("Check time", 1.23, Unit.SECONDS)
    assert snapshot["Memory used"] == Measurement("Memory used", 65536, Unit.KILO)
    assert isinstance(snapshot["Memory used"].value, int)


def test_parse_trims_padding_from_label_and_value() -> None:
    snapshot = parse_diagnostics("Instantiations:            45000   \r\n")

    assert list(snapshot) == ["Instantiations"]
    assert snapshot["Instantiations"].value == 45000


def test_lines_without_exactly_one_colon_are_skipped() -> None:
    raw = "\n".join(
        [
            "tsc diagnostics",
            "src/a.ts(1,2): error TS1005: ';' expected.",
            "Config: C:\\project\\tsconfig.json",
            "Files: 3",
        ]
    )

    snapshot = parse_diagnostics(raw)

    assert list(snapshot) == ["Files"]


def test_empty_label_or_value_is_skipped() -> None:
    snapshot = parse_diagnostics(": 12\nTypes:\nSymbols: 7")

    assert list(snapshot) == ["Symbols"]


def test_duplicate_labels_keep_last_value() -> None:
    snapshot = parse_diagnostics("Files: 1\nTypes: 5\nFiles: 2\n")

    assert snapshot["Files"].value == 2
    assert len(snapshot) == 2


def test_snapshot_preserves_input_order(previous_output: str) -> None:
    snapshot = parse_diagnostics(previous_output, strict=False)

    names = list(snapshot)
    assert names[0] == "Files"
    assert names[-1] == "Total time"
    assert names.index("Memory used") < names.index("Check time")


def test_snapshot_is_read_only() -> None:
    snapshot = parse_diagnostics("Files: 1")

    with pytest.raises(TypeError):
        snapshot["Files"] = Measurement("Files", 2)  # type: ignore[index]


def test_non_numeric_value_raises_in_strict_mode() -> None:
    with pytest.raises(DiagnosticsParseError) as excinfo:
        parse_diagnostics("Files: 3\nerror TS5023: Unknown compiler option '--foo'.\n")

    assert excinfo.value.line_number == 2
    assert "TS5023" in str(excinfo.value)


def test_non_numeric_value_is_skipped_when_lenient() -> None:
    snapshot = parse_diagnostics(
        "Files: 3\nerror TS5023: Unknown compiler option '--foo'.\nMemory used: 10K",
        strict=False,
    )

    assert list(snapshot) == ["Files", "Memory used"]


def test_kilo_value_must_be_an_integer() -> None:
    with pytest.raises(ValueError):
        parse_value("1.5K")


def test_seconds_normalize_to_milliseconds() -> None:
    assert normalize_to_millis(1.25, Unit.SECONDS) == 1250
    assert normalize_to_millis(250, Unit.NONE) == 250
    assert normalize_to_millis(64, Unit.KILO) == 64
    assert Measurement("Check time", 0.5, Unit.SECONDS).to_base() == 500


def test_measurement_display() -> None:
    assert Measurement("Check time", 1.0, Unit.SECONDS).display() == "1.00s"
    assert Measurement("Memory used", 2048, Unit.KILO).display() == "2048K"
    assert Measurement("Files", 7).display() == "7"
