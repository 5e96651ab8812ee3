"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path
from typing import Optional, Sequence

import pytest

from cuddlefish.vcs.command import CommandResult
from cuddlefish.vcs.git import GitRepo


class _GitRunnerController:
    """Scripted stand-in for run_command().

    Canned results are handed out in the order they were queued; once the
    queue is empty every call succeeds with empty output.
    """

    def __init__(self):
        self.call_history: list[dict] = []
        self._responses: list[tuple[int, str, str]] = []

    def queue_response(self, out: str = "", exit_code: int = 0, err: str = "") -> None:
        """Push a canned result for the next invocation."""
        self._responses.append((exit_code, out, err))

    @property
    def commands(self) -> list[list[str]]:
        return [call["args"] for call in self.call_history]

    def __call__(self, args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        self.call_history.append({"args": list(args), "cwd": cwd})
        exit_code, out, err = self._responses.pop(0) if self._responses else (0, "", "")
        return CommandResult(args=tuple(args), exit_code=exit_code, out=out, err=err)


@pytest.fixture
def git_runner():
    """Provide a fresh scripted runner."""
    return _GitRunnerController()


@pytest.fixture
def fake_repo(git_runner):
    """GitRepo wired to the scripted runner."""
    return GitRepo(runner=git_runner)


def _git(repo_path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=str(repo_path),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a temporary git repository with one commit on ``main``.

    Yields:
        Path to temporary git repository
    """
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    _git(repo_path, "init")
    _git(repo_path, "symbolic-ref", "HEAD", "refs/heads/main")

    # Configure git user for commits
    _git(repo_path, "config", "user.email", "test@example.com")
    _git(repo_path, "config", "user.name", "Test User")
    _git(repo_path, "config", "commit.gpgsign", "false")
    _git(repo_path, "config", "tag.gpgsign", "false")

    (repo_path / "README.md").write_text("hello\n")
    _git(repo_path, "add", "README.md")
    _git(repo_path, "commit", "-m", "Initial commit")

    yield repo_path


@pytest.fixture
def git():
    """Helper running git in a repository and returning trimmed stdout."""
    return _git
