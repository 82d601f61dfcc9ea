from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ._compat import tomllib

logger = logging.getLogger(__name__)


def _categories_from(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    logger.warning("Ignoring [tool.relnotes] categories: expected a list of strings, got %r", value)
    return ()


def _color_from(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    logger.warning("Ignoring [tool.relnotes] color: expected true or false, got %r", value)
    return True


@dataclass(slots=True)
class Config:
    """Represents relnotes configuration loaded from pyproject.toml."""

    project_root: Path | None = None
    categories: tuple[str, ...] = ()
    log_level: str = "warning"
    color: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any], project_root: Path) -> Config:
        """Create a Config instance from a ``[tool.relnotes]`` table.

        A single category string counts as a one-entry list. Values of the
        wrong type are ignored with a warning and the default is kept.
        """
        return cls(
            project_root=project_root,
            categories=_categories_from(data.get("categories", [])),
            log_level=str(data.get("log_level", "warning")),
            color=_color_from(data.get("color", True)),
        )


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find the pyproject.toml file by searching upwards from the start directory."""
    current_dir = start_dir or Path.cwd()
    while current_dir != current_dir.parent:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        current_dir = current_dir.parent
    return None


def load_config(start_dir: Path | None = None) -> Config:
    """Load relnotes configuration from pyproject.toml."""
    pyproject_path = find_pyproject_toml(start_dir)
    if not pyproject_path:
        return Config()

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
        relnotes_config = data.get("tool", {}).get("relnotes", {})
        return Config.from_dict(relnotes_config, pyproject_path.parent)
    except (OSError, tomllib.TOMLDecodeError):
        return Config()
