"""Rendering of categorized commits as a release note."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .categories import Category


@dataclass(slots=True)
class ReleaseNote:
    tag: str
    categories: Sequence[Category] = field(default_factory=list)
    start: str | None = None

    def non_empty_categories(self) -> list[Category]:
        return [category for category in self.categories if category.commits]

    @property
    def commit_count(self) -> int:
        return sum(len(category.commits) for category in self.categories)

    def to_markdown(self) -> str:
        lines = [f"# Release Note for {self.tag}"]
        for category in self.non_empty_categories():
            lines.append(f"## {category.title}")
            lines.extend(f"* {commit.hash} {commit.raw_message}" for commit in category.commits)
            lines.append("")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "start": self.start,
            "categories": [category.to_dict() for category in self.non_empty_categories()],
            "commit_count": self.commit_count,
        }


__all__ = ["ReleaseNote"]
