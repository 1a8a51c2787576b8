"""Git helpers for switching between the PR checkout and the base branch."""

from __future__ import annotations

from pathlib import Path

from tscdiag.exceptions import GitError
from tscdiag.log import get_logger
from tscdiag.runner.process import run_command

logger = get_logger(__name__)


def git(*args: str, cwd: str | Path = ".") -> str:
    """Run a git command and return its stripped stdout.

    Raises:
        GitError: If git exits non-zero
    """
    result = run_command(["git", *args], cwd=cwd)
    if result.returncode != 0:
        raise GitError(f"git {' '.join(args)} failed: {result.stderr.strip()}")
    return result.stdout.strip()


def current_ref(cwd: str | Path = ".") -> str:
    """Branch name of HEAD, or the commit sha when HEAD is detached."""
    branch = git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)
    if branch != "HEAD":
        return branch
    return git("rev-parse", "HEAD", cwd=cwd)


def checkout(branch: str, cwd: str | Path = ".") -> None:
    """Check out ``branch``, fetching it from origin first when possible."""
    try:
        git("fetch", "--no-tags", "origin", branch, cwd=cwd)
    except GitError as e:
        # Local-only branches are still usable
        logger.warning("Could not fetch '%s' from origin: %s", branch, e)

    logger.info("Checking out %s", branch)
    git("checkout", branch, cwd=cwd)


def restore(ref: str, cwd: str | Path = ".") -> None:
    """Return the working tree to ``ref`` after measuring the base branch."""
    logger.info("Restoring %s", ref)
    git("checkout", ref, cwd=cwd)
