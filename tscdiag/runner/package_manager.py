"""Package manager detection and dependency installation."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from tscdiag.exceptions import CommandError, UnsupportedPackageManagerError
from tscdiag.log import get_logger
from tscdiag.runner.process import run_command

logger = get_logger(__name__)


class PackageManager(Enum):
    """Package managers tscdiag can install dependencies with."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


# Checked in order; the first lockfile found wins.
LOCKFILES: list[tuple[str, PackageManager | None]] = [
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("package-lock.json", PackageManager.NPM),
    ("npm-shrinkwrap.json", PackageManager.NPM),
    ("bun.lockb", None),
    ("bun.lock", None),
]

INSTALL_COMMANDS = {
    PackageManager.NPM: ["npm", "ci"],
    PackageManager.YARN: ["yarn", "install", "--frozen-lockfile"],
    PackageManager.PNPM: ["pnpm", "install", "--frozen-lockfile"],
}

EXEC_PREFIXES = {
    PackageManager.NPM: ["npx"],
    PackageManager.YARN: ["yarn"],
    PackageManager.PNPM: ["pnpm", "exec"],
}


def find_lockfile(project_dir: str | Path) -> Path | None:
    """Return the lockfile that decides the package manager, if any."""
    project_dir = Path(project_dir)
    for name, _ in LOCKFILES:
        path = project_dir / name
        if path.exists():
            return path
    return None


def detect_package_manager(project_dir: str | Path) -> PackageManager:
    """Detect the package manager from the lockfile in ``project_dir``.

    Falls back to npm when the project has no lockfile.

    Raises:
        UnsupportedPackageManagerError: If the lockfile belongs to an
            unsupported package manager
    """
    lockfile = find_lockfile(project_dir)
    if lockfile is None:
        logger.debug("No lockfile in %s, assuming npm", project_dir)
        return PackageManager.NPM

    manager = dict(LOCKFILES)[lockfile.name]
    if manager is None:
        raise UnsupportedPackageManagerError(
            f"Unsupported package manager (found {lockfile.name}); "
            "supported: npm, yarn, pnpm"
        )
    logger.debug("Detected %s from %s", manager.value, lockfile.name)
    return manager


def install_command(manager: PackageManager, project_dir: str | Path) -> list[str]:
    """Command that installs dependencies reproducibly."""
    if manager is PackageManager.NPM and find_lockfile(project_dir) is None:
        return ["npm", "install"]
    return list(INSTALL_COMMANDS[manager])


def install_dependencies(
    manager: PackageManager,
    project_dir: str | Path,
    timeout: float | None = None,
) -> None:
    """Install the project's dependencies.

    Raises:
        CommandError: If the install command fails
    """
    argv = install_command(manager, project_dir)
    logger.info("Installing dependencies with %s", manager.value)
    result = run_command(argv, cwd=project_dir, timeout=timeout)
    if result.returncode != 0:
        raise CommandError(
            f"'{' '.join(argv)}' failed with exit code {result.returncode}:\n"
            f"{result.stderr.strip()}"
        )
