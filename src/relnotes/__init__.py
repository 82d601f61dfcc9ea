"""relnotes public API."""

from importlib import metadata

__version__ = metadata.version("relnotes")

from .arguments import Arguments, OptionResult, OptionType, Rule, RuleError
from .categories import DEFAULT_CATEGORIES, Category, CategoryFormatError, categorize
from .git import Commit, GitError, GitRepository
from .report import ReleaseNote

__all__ = [
    "Arguments",
    "Category",
    "CategoryFormatError",
    "Commit",
    "DEFAULT_CATEGORIES",
    "GitError",
    "GitRepository",
    "OptionResult",
    "OptionType",
    "ReleaseNote",
    "Rule",
    "RuleError",
    "categorize",
    "__version__",
]
