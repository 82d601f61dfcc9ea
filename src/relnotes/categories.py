from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .git import Commit

OTHER_CHANGES = "Other Changes"


class CategoryFormatError(ValueError):
    """Raised when a category definition is not ``<title>:<prefix>,...``."""


@dataclass(slots=True)
class Category:
    title: str
    prefixes: tuple[str, ...] = ()
    commits: list[Commit] = field(default_factory=list)

    @property
    def is_catch_all(self) -> bool:
        return not self.prefixes

    def matches(self, commit: Commit) -> bool:
        if self.is_catch_all:
            return False
        return any(prefix in self.prefixes for prefix in commit.prefixes)

    def empty_copy(self) -> Category:
        return Category(title=self.title, prefixes=tuple(self.prefixes))

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "prefixes": list(self.prefixes),
            "commits": [commit.to_dict() for commit in self.commits],
        }


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("Features", ("feat",)),
    Category("Fixes", ("fix",)),
    Category("Performances", ("perf", "performance")),
    Category("Refactoring", ("refactor",)),
    Category("Dependencies", ("dep", "deps")),
    Category("Documents", ("doc", "docs")),
    Category(OTHER_CHANGES),
)


def default_categories() -> list[Category]:
    return [category.empty_copy() for category in DEFAULT_CATEGORIES]


def parse_category(value: str) -> Category:
    """Parse ``"<title>:<prefix>,<prefix>,..."`` into a :class:`Category`."""

    title, sep, raw_prefixes = value.partition(":")
    if not sep:
        raise CategoryFormatError(
            f"invalid category {value!r}: expected '<title>:<prefix>,<prefix>,...'",
        )
    prefixes = tuple(item.strip() for item in raw_prefixes.split(",") if item.strip())
    return Category(title=title.strip(), prefixes=prefixes)


def parse_categories(values: Iterable[str]) -> list[Category]:
    categories = [parse_category(value) for value in values]
    if not categories:
        return default_categories()
    # Unmatched commits land in the trailing catch-all.
    categories.append(Category(OTHER_CHANGES))
    return categories


def categorize(commits: Sequence[Commit], categories: Sequence[Category]) -> list[Category]:
    """Sort commits into copies of ``categories``.

    ``commits`` is expected in ``git log`` order (newest first); each category
    lists its commits oldest first. The first category sharing a prefix with a
    commit wins, the last catch-all category collects the rest.
    """

    result = [category.empty_copy() for category in categories]
    fallback = next((category for category in reversed(result) if category.is_catch_all), None)
    for commit in reversed(commits):
        target = next((category for category in result if category.matches(commit)), fallback)
        if target is None:
            raise ValueError(f"no category accepts commit {commit.hash}")
        target.commits.append(commit)
    return result


__all__ = [
    "Category",
    "CategoryFormatError",
    "DEFAULT_CATEGORIES",
    "OTHER_CHANGES",
    "categorize",
    "default_categories",
    "parse_categories",
    "parse_category",
]
