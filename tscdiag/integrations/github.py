"""GitHub integration for posting the diagnostics report on a PR."""

from __future__ import annotations

import json
import os
import re
from typing import Any, NamedTuple

import requests

from tscdiag.exceptions import GitHubAPIError, PullRequestContextError
from tscdiag.log import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class PRInfo(NamedTuple):
    """Information about the current PR."""
    owner: str
    repo: str
    number: int


class GitHubReporter:
    """Create or update a single report comment on a pull request.

    The comment is found again on later runs by a marker substring in its
    body, so each PR carries one up-to-date report.
    """

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        api_url: str | None = None,
        timeout: float = 30,
    ):
        """Initialize GitHub reporter.

        Args:
            token: GitHub token for API auth
            session: HTTP session (a new one is created if omitted)
            api_url: REST API base URL (defaults to GITHUB_API_URL or api.github.com)
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.api_url = (api_url or os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"token {self.token}",
                "Accept": "application/vnd.github.v3+json",
            }
        )

    @staticmethod
    def detect_pr_info() -> PRInfo | None:
        """Detect PR info from CI environment variables.

        Supports:
        - GitHub Actions (GITHUB_REPOSITORY and the pull_request event payload)
        - Manual override with GITHUB_PR_NUMBER (number or PR URL)

        Returns:
            PRInfo if running in PR context, None otherwise
        """
        repo = os.environ.get("GITHUB_REPOSITORY")
        if not repo or "/" not in repo:
            return None
        owner, repo_name = repo.split("/", 1)

        pr_number: Any = os.environ.get("GITHUB_PR_NUMBER")

        # Extract PR number from URL like https://github.com/owner/repo/pull/123
        if pr_number and "/" in pr_number:
            match = re.search(r"/pull/(\d+)", pr_number)
            if match is None:
                raise PullRequestContextError(f"Invalid pull request URL: {pr_number!r}")
            pr_number = match.group(1)

        if not pr_number:
            event_path = os.environ.get("GITHUB_EVENT_PATH")
            if event_path and os.path.exists(event_path):
                try:
                    with open(event_path, encoding="utf-8") as f:
                        event = json.load(f)
                except (json.JSONDecodeError, OSError) as e:
                    logger.warning("Could not read GitHub event payload %s: %s", event_path, e)
                    event = None
                if isinstance(event, dict):
                    pr_number = (event.get("pull_request") or {}).get("number")

        if not pr_number:
            return None
        if not str(pr_number).isdigit():
            raise PullRequestContextError(f"Invalid pull request number: {pr_number!r}")

        return PRInfo(owner=owner, repo=repo_name, number=int(pr_number))

    @staticmethod
    def parse_pr_url(url: str) -> PRInfo | None:
        """Parse PR URL to extract owner, repo, and PR number."""
        # Match patterns like:
        # https://github.com/owner/repo/pull/123
        # github.com/owner/repo/pull/123
        match = re.search(r"github\.com[/:]([^/]+)/([^/]+)/pull/(\d+)", url)
        if match:
            return PRInfo(
                owner=match.group(1),
                repo=match.group(2),
                number=int(match.group(3)),
            )
        return None

    def resolve_pr(self, pr_url: str | None = None) -> PRInfo:
        """Find the pull request to comment on.

        Raises:
            PullRequestContextError: If no pull request can be determined
        """
        pr_info = self.parse_pr_url(pr_url) if pr_url else self.detect_pr_info()
        if pr_info is None:
            raise PullRequestContextError(
                "Reporting can only be used in a pull request context "
                "(set GITHUB_REPOSITORY and run on a pull_request event, or pass --pr-url)"
            )
        return pr_info

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise GitHubAPIError(f"{method} {url} failed: {e}") from e

        if response.status_code not in (200, 201):
            raise GitHubAPIError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            )
        return response.json()

    def _comments_url(self, pr_info: PRInfo) -> str:
        return f"{self.api_url}/repos/{pr_info.owner}/{pr_info.repo}/issues/{pr_info.number}/comments"

    def find_comment(self, pr_info: PRInfo, marker: str) -> dict[str, Any] | None:
        """Return the first PR comment whose body contains ``marker``."""
        page = 1
        while True:
            comments = self._request(
                "GET",
                self._comments_url(pr_info),
                params={"per_page": 100, "page": page},
            )
            for comment in comments:
                if marker in (comment.get("body") or ""):
                    return comment
            if len(comments) < 100:
                return None
            page += 1

    def upsert_comment(self, pr_info: PRInfo, body: str, marker: str) -> str:
        """Update the marked comment, or create it if none exists.

        Returns:
            URL of the created or updated comment

        Raises:
            GitHubAPIError: If an API call fails
        """
        logger.debug("Sending comment:\n%s", body)

        existing = self.find_comment(pr_info, marker)
        if existing is not None:
            url = f"{self.api_url}/repos/{pr_info.owner}/{pr_info.repo}/issues/comments/{existing['id']}"
            comment = self._request("PATCH", url, json={"body": body})
            logger.info("Updated comment on PR #%d", pr_info.number)
        else:
            comment = self._request("POST", self._comments_url(pr_info), json={"body": body})
            logger.info("Created comment on PR #%d", pr_info.number)

        return comment.get("html_url", "")
