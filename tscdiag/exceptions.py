"""Custom exceptions for tscdiag."""


class TscDiagError(Exception):
    """Base exception for tscdiag."""

    pass


class ConfigurationError(TscDiagError):
    """Configuration is invalid or incomplete (e.g., missing token)."""

    pass


class UnsupportedPackageManagerError(TscDiagError):
    """The project uses a package manager tscdiag cannot drive."""

    pass


class CommandError(TscDiagError):
    """External command could not be executed."""

    pass


class CommandContractError(CommandError):
    """Custom command output does not contain compiler diagnostics."""

    pass


class GitError(TscDiagError):
    """Git operation failed."""

    pass


class PullRequestContextError(TscDiagError):
    """Reporting was requested outside a pull request."""

    pass


class GitHubAPIError(TscDiagError):
    """Error calling the GitHub REST API."""

    pass


class DiagnosticsParseError(TscDiagError):
    """A diagnostics line carries a value that is not a number."""

    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: cannot parse diagnostics value in {line!r}")
