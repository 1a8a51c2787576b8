from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from tscdiag.exceptions import GitError
from tscdiag.runner.git import checkout, current_ref, restore

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _run(cmd: list[str], cwd: Path) -> str:
    out = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True)
    return out.stdout.strip()


def _commit(path: Path, name: str) -> str:
    marker = path / "marker.txt"
    with marker.open("a", encoding="utf-8") as fh:
        fh.write(f"{name}\n")
    _run(["git", "add", "marker.txt"], cwd=path)
    _run(["git", "commit", "-m", name], cwd=path)
    return _run(["git", "rev-parse", "HEAD"], cwd=path)


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    _run(["git", "init", "-b", "main"], cwd=tmp_path)
    _run(["git", "config", "user.name", "tester"], cwd=tmp_path)
    _run(["git", "config", "user.email", "tester@example.com"], cwd=tmp_path)
    _commit(tmp_path, "base")
    _run(["git", "checkout", "-b", "feature"], cwd=tmp_path)
    _commit(tmp_path, "feature")
    return tmp_path


def test_current_ref_is_branch_name(repo: Path) -> None:
    assert current_ref(repo) == "feature"


def test_current_ref_is_sha_when_detached(repo: Path) -> None:
    sha = _run(["git", "rev-parse", "HEAD"], cwd=repo)
    _run(["git", "checkout", "--detach"], cwd=repo)

    assert current_ref(repo) == sha


def test_checkout_without_remote_uses_local_branch(repo: Path) -> None:
    checkout("main", repo)

    assert current_ref(repo) == "main"
    assert (repo / "marker.txt").read_text() == "base\n"


def test_restore_returns_to_original_ref(repo: Path) -> None:
    original = current_ref(repo)
    checkout("main", repo)

    restore(original, repo)

    assert current_ref(repo) == "feature"
    assert (repo / "marker.txt").read_text() == "base\nfeature\n"


def test_checkout_unknown_branch_raises(repo: Path) -> None:
    with pytest.raises(GitError, match="checkout"):
        checkout("does-not-exist", repo)
