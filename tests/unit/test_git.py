from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from relnotes.git import Commit, GitError, GitRepository, run_git


def test_commit_from_log_line_splits_prefixes() -> None:
    commit = Commit.from_log_line("1a2b3c4 feat/perf: faster scanning")
    assert commit.hash == "1a2b3c4"
    assert commit.raw_message == "feat/perf: faster scanning"
    assert commit.prefixes == ["feat", "perf"]


def test_commit_from_log_line_without_prefix() -> None:
    commit = Commit.from_log_line("1a2b3c4 Merge branch 'main'")
    assert commit.prefixes == []
    assert commit.raw_message == "Merge branch 'main'"


def test_commit_from_log_line_uses_first_separator() -> None:
    commit = Commit.from_log_line("1a2b3c4 fix: handle a: b")
    assert commit.prefixes == ["fix"]


def test_commit_from_log_line_rejects_missing_subject() -> None:
    with pytest.raises(GitError, match="unexpected output of git log"):
        Commit.from_log_line("1a2b3c4")


def test_tags_sorted_and_latest(fake_git) -> None:
    repo = GitRepository()
    assert repo.tags() == ["v0.1.0", "v0.2.0", "v1.0.0"]
    assert repo.latest_tag() == "v1.0.0"
    assert fake_git.calls[0][0] == ("tag", "--list", "--sort=version:refname")


def test_tags_raise_when_missing(fake_git) -> None:
    fake_git.tags = []
    with pytest.raises(GitError, match="no tags found"):
        GitRepository().latest_tag()


def test_previous_tag(fake_git) -> None:
    repo = GitRepository()
    assert repo.previous_tag("v1.0.0") == "v0.2.0"
    assert repo.previous_tag("v0.1.0") is None
    with pytest.raises(GitError, match="v9.9.9"):
        repo.previous_tag("v9.9.9")


def test_first_commit(fake_git) -> None:
    fake_git.history = ["a000001", "a000002"]
    assert GitRepository().first_commit() == "a000001"
    fake_git.history = []
    with pytest.raises(GitError, match="no commits found"):
        GitRepository().first_commit()


def test_commits_between_parses_log(fake_git, tmp_path: Path) -> None:
    fake_git.ranges["v0.2.0..v1.0.0"] = ["c3 feat: three", "c2 two"]
    repo = GitRepository(tmp_path)
    commits = repo.commits_between("v0.2.0", "v1.0.0")
    assert [commit.hash for commit in commits] == ["c3", "c2"]
    assert commits[0].prefixes == ["feat"]
    assert fake_git.calls[-1] == (("log", "--pretty=format:%h %s", "v0.2.0..v1.0.0"), tmp_path)


def test_commits_between_empty_range(fake_git) -> None:
    assert GitRepository().commits_between("v0.1.0", "v0.2.0") == []


def test_run_git_wraps_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr("relnotes.git.subprocess.run", boom)
    with pytest.raises(GitError, match="git executable not found"):
        run_git(["status"])


def test_run_git_surfaces_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args, **kwargs):
        raise subprocess.CalledProcessError(128, args[0], output="", stderr="fatal: not a git repository\n")

    monkeypatch.setattr("relnotes.git.subprocess.run", fail)
    with pytest.raises(GitError, match="fatal: not a git repository"):
        run_git(["tag"])


def _commit(repo: Path, env: dict[str, str], message: str, tag: str | None = None) -> None:
    subprocess.run(
        ["git", "commit", "--allow-empty", "-q", "-m", message],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
    )
    if tag:
        subprocess.run(["git", "tag", tag], cwd=repo, env=env, check=True, capture_output=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_repository_against_real_git(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    env = {
        **os.environ,
        "HOME": str(tmp_path),
        "GIT_CONFIG_NOSYSTEM": "1",
        "GIT_AUTHOR_NAME": "Release Bot",
        "GIT_AUTHOR_EMAIL": "bot@example.com",
        "GIT_COMMITTER_NAME": "Release Bot",
        "GIT_COMMITTER_EMAIL": "bot@example.com",
    }
    subprocess.run(["git", "init", "-q"], cwd=repo, env=env, check=True, capture_output=True)
    _commit(repo, env, "chore: initial commit", tag="v0.2.0")
    _commit(repo, env, "feat: second")
    _commit(repo, env, "fix: third", tag="v0.10.0")
    _commit(repo, env, "docs: fourth", tag="v0.9.0")

    git_repo = GitRepository(repo)
    assert git_repo.tags() == ["v0.2.0", "v0.9.0", "v0.10.0"]
    assert git_repo.previous_tag("v0.10.0") == "v0.9.0"
    assert git_repo.previous_tag("v0.2.0") is None

    first = git_repo.first_commit()
    assert first
    messages = [commit.raw_message for commit in git_repo.commits_between(first, "v0.9.0")]
    assert messages == ["docs: fourth", "fix: third", "feat: second"]
