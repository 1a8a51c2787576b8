"""Thin wrapper around subprocess for the external tools tscdiag drives."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from tscdiag.exceptions import CommandError
from tscdiag.log import get_logger

logger = get_logger(__name__)


def run_command(
    argv: Sequence[str],
    cwd: str | Path = ".",
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and capture its output.

    The exit code is not checked; callers decide what a failure means.

    Raises:
        CommandError: If the executable is missing or the timeout expires
    """
    printable = shlex.join(argv)
    logger.debug("Running: %s (cwd=%s)", printable, cwd)
    try:
        result = subprocess.run(
            list(argv),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {argv[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"Command timed out after {timeout}s: {printable}") from e

    logger.debug("Exit code %d: %s", result.returncode, printable)
    return result
