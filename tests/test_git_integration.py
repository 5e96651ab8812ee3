"""End-to-end tests of GitRepo against real temporary repositories."""

import logging
import shutil

import pytest

from cuddlefish.vcs.git import GitRepo
from cuddlefish.versioning import derive_version

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@pytest.fixture
def tagged_repo(temp_git_repo, git):
    """Temporary repository whose only commit is tagged v1.0.0."""
    git(temp_git_repo, "tag", "v1.0.0")
    return temp_git_repo


def test_exact_tag(tagged_repo, git):
    status = GitRepo(path=tagged_repo).describe()

    head = git(tagged_repo, "rev-parse", "HEAD")
    assert status.tag == "v1.0.0"
    assert status.ahead == 0
    assert status.is_ahead is False
    assert status.is_dirty is False
    assert status.ref == head
    assert head.startswith(status.ref_short)


def test_commits_ahead_of_tag(tagged_repo, git):
    (tagged_repo / "CHANGES").write_text("more\n")
    git(tagged_repo, "add", "CHANGES")
    git(tagged_repo, "commit", "-m", "Second commit")

    status = GitRepo(path=tagged_repo).describe()

    assert status.tag == "v1.0.0"
    assert status.ahead == 1
    assert status.is_ahead is True
    assert derive_version(status) == "v1.0.0.1"


def test_dirty_working_tree(tagged_repo):
    (tagged_repo / "README.md").write_text("changed\n")

    repo = GitRepo(path=tagged_repo)
    status = repo.status()

    assert status.is_dirty is True
    assert status.message is None
    assert status.timestamp is None
    assert derive_version(status) == "v1.0.0-SNAPSHOT"


def test_clean_status_has_message_and_timestamp(tagged_repo, git):
    status = GitRepo(path=tagged_repo).status()

    assert "Initial commit" in status.message
    assert status.timestamp.isdigit()
    assert status.timestamp == git(tagged_repo, "log", "-1", "--pretty=%ct")


def test_describe_is_repeatable(tagged_repo):
    repo = GitRepo(path=tagged_repo)
    assert repo.describe() == repo.describe()


def test_no_tags_is_unknown(temp_git_repo, caplog):
    caplog.set_level(logging.WARNING)

    assert GitRepo(path=temp_git_repo).status() is None
    assert "git describe exited" in caplog.text


def test_not_a_repository_is_unknown(tmp_path, caplog, monkeypatch):
    caplog.set_level(logging.WARNING)
    plain_dir = tmp_path / "plain"
    plain_dir.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))

    assert GitRepo(path=plain_dir).describe() is None
    assert "exited 128" in caplog.text


def test_auxiliary_queries(tagged_repo, git):
    repo = GitRepo(path=tagged_repo)

    assert repo.current_branch() == "main"
    assert repo.resolve_ref("v1.0.0") == git(tagged_repo, "rev-parse", "HEAD")
    assert repo.ref_message("v1.0.0").endswith("Initial commit\n")
    assert repo.ref_ts("v1.0.0").isdigit()
