"""Integrations with code hosting services."""

from tscdiag.integrations.github import GitHubReporter, PRInfo

__all__ = [
    "GitHubReporter",
    "PRInfo",
]
