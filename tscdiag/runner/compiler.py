"""Run the TypeScript compiler and capture its diagnostics output."""

from __future__ import annotations

import shlex
from pathlib import Path

from tscdiag.exceptions import CommandContractError, CommandError
from tscdiag.log import get_logger
from tscdiag.runner.package_manager import EXEC_PREFIXES, PackageManager
from tscdiag.runner.process import run_command

logger = get_logger(__name__)

DEFAULT_FLAGS = "--noEmit --incremental false"

# Printed by both --diagnostics and --extendedDiagnostics
DIAGNOSTICS_MARKER = "Check time"


def build_tsc_command(
    manager: PackageManager,
    flags: str = DEFAULT_FLAGS,
    extended: bool = True,
) -> list[str]:
    """Build the argv that runs tsc through the project's package manager."""
    diagnostics_flag = "--extendedDiagnostics" if extended else "--diagnostics"
    return [*EXEC_PREFIXES[manager], "tsc", *shlex.split(flags), diagnostics_flag]


def _capture(argv: list[str], cwd: str | Path, timeout: float | None) -> str:
    # tsc exits non-zero on type errors but still prints its diagnostics
    result = run_command(argv, cwd=cwd, timeout=timeout)
    if result.returncode != 0:
        logger.warning(
            "'%s' exited with code %d; using its output anyway",
            shlex.join(argv),
            result.returncode,
        )
        if result.stderr.strip():
            logger.debug("stderr:\n%s", result.stderr.strip())
    return result.stdout


def run_diagnostics(
    argv: list[str],
    cwd: str | Path = ".",
    timeout: float | None = None,
) -> str:
    """Run a diagnostics command and return its stdout.

    Raises:
        CommandError: If the command cannot be executed or prints nothing
    """
    output = _capture(argv, cwd, timeout)
    if not output.strip():
        raise CommandError(f"'{shlex.join(argv)}' produced no output")
    return output


def run_custom_command(
    command: str,
    cwd: str | Path = ".",
    timeout: float | None = None,
) -> str:
    """Run a user-supplied diagnostics command.

    Raises:
        CommandContractError: If the output has no compiler diagnostics
    """
    output = _capture(shlex.split(command), cwd, timeout)
    if DIAGNOSTICS_MARKER not in output:
        raise CommandContractError(
            f"Custom command '{command}' did not print compiler diagnostics "
            f"(no '{DIAGNOSTICS_MARKER}' line). Pass --extendedDiagnostics to tsc."
        )
    return output
