"""Measure diagnostics on the PR and the base branch, then compare them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tscdiag.config import DiffConfig
from tscdiag.diagnostics import Report, compare_diagnostics, parse_diagnostics
from tscdiag.exceptions import ConfigurationError, GitError
from tscdiag.integrations.github import GitHubReporter
from tscdiag.log import get_logger
from tscdiag.reporters.diagnostics import DiagnosticsReporter, format_marker
from tscdiag.runner import git
from tscdiag.runner.compiler import build_tsc_command, run_custom_command, run_diagnostics
from tscdiag.runner.package_manager import detect_package_manager, install_dependencies

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of a full comparison run.

    Attributes:
        report: Per-metric comparison
        markdown: Rendered Markdown body
        current_output: Raw diagnostics of the PR checkout
        previous_output: Raw diagnostics of the base branch
        comment_url: URL of the posted comment, if reporting was enabled
    """

    report: Report
    markdown: str
    current_output: str
    previous_output: str
    comment_url: str | None = None


class DiagnosticsRun:
    """Ordered steps of one comparison.

    Each step is a method so tests (and callers with unusual setups) can
    replace the ones that touch the outside world.
    """

    def __init__(
        self,
        config: DiffConfig,
        reporter_factory: Callable[[str], GitHubReporter] = GitHubReporter,
    ) -> None:
        self.config = config
        self.reporter_factory = reporter_factory

    def validate(self) -> None:
        """Fail fast on configuration problems before measuring anything.

        Raises:
            ConfigurationError: If reporting is enabled without a token
        """
        if self.config.reporting_enabled and not self.config.access_token:
            raise ConfigurationError(
                "'github-token' is not set. Please give an API token to post the comment"
            )

    def measure(self) -> str:
        """Run the compiler in the working directory and return its output."""
        cwd = self.config.working_dir
        timeout = self.config.command_timeout

        if self.config.custom_command:
            return run_custom_command(self.config.custom_command, cwd=cwd, timeout=timeout)

        manager = detect_package_manager(cwd)
        if self.config.install_dependencies:
            install_dependencies(manager, cwd, timeout=timeout)
        argv = build_tsc_command(
            manager,
            flags=self.config.flags,
            extended=self.config.extended_diagnostics,
        )
        return run_diagnostics(argv, cwd=cwd, timeout=timeout)

    def current_ref(self) -> str:
        return git.current_ref(self.config.working_dir)

    def checkout_base(self) -> None:
        git.checkout(self.config.base_branch, self.config.working_dir)

    def restore(self, ref: str) -> None:
        git.restore(ref, self.config.working_dir)

    def reinstall(self) -> None:
        """Put the PR's dependencies back after measuring the base branch."""
        if self.config.custom_command or not self.config.install_dependencies:
            return
        cwd = self.config.working_dir
        install_dependencies(detect_package_manager(cwd), cwd, timeout=self.config.command_timeout)

    def compare(self, previous_output: str, current_output: str) -> Report:
        previous = parse_diagnostics(previous_output, strict=False)
        current = parse_diagnostics(current_output, strict=False)
        logger.debug("Parsed %d previous and %d current metrics", len(previous), len(current))
        return compare_diagnostics(previous, current, self.config.threshold_ms)

    def render(self, report: Report) -> str:
        return DiagnosticsReporter().generate_markdown_report(
            report,
            collapsible=self.config.collapsible,
            marker=self.config.comment_marker,
        )

    def post(self, markdown: str, pr_url: str | None = None) -> str:
        github = self.reporter_factory(self.config.access_token)
        pr_info = github.resolve_pr(pr_url)
        return github.upsert_comment(pr_info, markdown, format_marker(self.config.comment_marker))

    def execute(self, pr_url: str | None = None) -> RunResult:
        """Run every step in order.

        The PR checkout is measured first; the base branch is measured after
        the checkout, and the original ref is restored afterwards. A failed
        restore after a failed measurement is logged so the measurement error
        is the one raised.
        """
        self.validate()

        logger.info("Measuring current diagnostics")
        current_output = self.measure()

        original_ref = self.current_ref()
        self.checkout_base()
        try:
            logger.info("Measuring diagnostics on %s", self.config.base_branch)
            previous_output = self.measure()
        except Exception:
            try:
                self.restore(original_ref)
            except GitError as restore_error:
                logger.error("Could not restore %s: %s", original_ref, restore_error)
            raise
        self.restore(original_ref)
        self.reinstall()

        report = self.compare(previous_output, current_output)
        markdown = self.render(report)

        comment_url = None
        if self.config.reporting_enabled:
            comment_url = self.post(markdown, pr_url)

        return RunResult(
            report=report,
            markdown=markdown,
            current_output=current_output,
            previous_output=previous_output,
            comment_url=comment_url,
        )


def run(config: DiffConfig, pr_url: str | None = None) -> RunResult:
    """Compare diagnostics of the current checkout against the base branch."""
    return DiagnosticsRun(config).execute(pr_url)
