from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when a git command fails or prints something unexpected."""


def run_git(args: list[str], *, cwd: Path | str | None = None) -> str:
    logger.debug("running git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found") from exc
    except subprocess.CalledProcessError as exc:
        message = exc.stderr.strip() or exc.stdout.strip() or "git command failed"
        raise GitError(message) from exc
    return result.stdout


@dataclass(slots=True)
class Commit:
    """One ``git log`` entry with its subject-prefix segments."""

    hash: str
    raw_message: str
    prefixes: list[str] = field(default_factory=list)

    @classmethod
    def from_log_line(cls, line: str) -> Commit:
        """Parse a ``"<short hash> <subject>"`` line.

        ``"feat/perf: faster scan"`` yields the prefixes ``["feat", "perf"]``;
        a subject without ``": "`` has no prefixes.
        """
        hash_, sep, raw_message = line.partition(" ")
        if not sep:
            raise GitError(f"unexpected output of git log: {line!r}")
        prefix, sep, _ = raw_message.partition(": ")
        prefixes = prefix.split("/") if sep else []
        return cls(hash=hash_, raw_message=raw_message, prefixes=prefixes)

    def to_dict(self) -> dict[str, object]:
        return {
            "hash": self.hash,
            "prefixes": list(self.prefixes),
            "message": self.raw_message,
        }


class GitRepository:
    """Read-only queries against the repository at ``path`` (cwd by default)."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None

    def _git(self, *args: str) -> str:
        return run_git(list(args), cwd=self.path)

    def tags(self) -> list[str]:
        """Return every tag ordered by version precedence, oldest first."""
        output = self._git("tag", "--list", "--sort=version:refname")
        tags = [line.strip() for line in output.splitlines() if line.strip()]
        if not tags:
            raise GitError("no tags found")
        return tags

    def latest_tag(self) -> str:
        return self.tags()[-1]

    def previous_tag(self, tag: str) -> str | None:
        """Return the tag before ``tag``, or ``None`` when ``tag`` is the oldest."""
        tags = self.tags()
        try:
            index = tags.index(tag)
        except ValueError:
            raise GitError(f"tag {tag} not found") from None
        if index == 0:
            return None
        return tags[index - 1]

    def first_commit(self) -> str:
        output = self._git("log", "--reverse", "--pretty=format:%h")
        for line in output.splitlines():
            if line.strip():
                return line.strip()
        raise GitError("no commits found")

    def commits_between(self, start: str, end: str) -> list[Commit]:
        """Return commits reachable from ``end`` but not ``start``, newest first."""
        output = self._git("log", "--pretty=format:%h %s", f"{start}..{end}")
        return [Commit.from_log_line(line) for line in output.splitlines() if line.strip()]


__all__ = ["Commit", "GitError", "GitRepository", "run_git"]
