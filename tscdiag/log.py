"""Logging helper module."""

from logging import DEBUG, INFO, Logger, basicConfig, getLogger

from rich.console import Console
from rich.logging import RichHandler


def init_logging(verbose: bool = False) -> None:
    """Initialize logging for the application.

    Should be called once when the application starts. Log records go to
    stderr so that reports printed to stdout stay machine readable.
    """
    basicConfig(
        level=DEBUG if verbose else INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=verbose,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )
    # requests/urllib3 are chatty at DEBUG
    getLogger("urllib3").setLevel(INFO)

    if verbose:
        getLogger("tscdiag").debug("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)
