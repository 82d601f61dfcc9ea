from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from relnotes.config import Config
from relnotes.git import GitError


class FakeGit:
    """Stand-in for ``relnotes.git.run_git`` backed by canned output."""

    def __init__(self) -> None:
        self.tags: list[str] = ["v0.1.0", "v0.2.0", "v1.0.0"]
        self.history: list[str] = ["a000001"]
        self.ranges: dict[str, list[str]] = {}
        self.calls: list[tuple[tuple[str, ...], Path | str | None]] = []

    def __call__(self, args: list[str], *, cwd: Path | str | None = None) -> str:
        self.calls.append((tuple(args), cwd))
        if args[0] == "tag":
            return "".join(f"{tag}\n" for tag in self.tags)
        if args[:2] == ["log", "--reverse"]:
            return "\n".join(self.history)
        if args[0] == "log":
            return "\n".join(self.ranges.get(args[-1], [])) + "\n"
        raise GitError(f"unexpected git call: {args}")


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr("relnotes.git.run_git", fake)
    return fake


@pytest.fixture
def mock_config(tmp_path: Path) -> Config:
    """A config rooted in a temporary directory with no overrides."""
    return Config(project_root=tmp_path, color=False)


@pytest.fixture
def patch_config(monkeypatch: pytest.MonkeyPatch, mock_config: Config) -> MagicMock:
    """Patch the load_config function to return a mock config."""
    mock = MagicMock(return_value=mock_config)
    monkeypatch.setattr("relnotes.cli.load_config", mock)
    return mock


@pytest.fixture(autouse=True)
def reset_relnotes_logger() -> Iterator[None]:
    """Drop handlers installed by configure_logging between tests."""
    logger = logging.getLogger("relnotes")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
