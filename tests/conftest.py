"""Pytest configuration for relnotes tests."""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    """Prepend the project src directory so tests import relnotes from the checkout."""

    src_path = Path(__file__).resolve().parents[1] / "src"
    if src_path.is_dir() and str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_ensure_src_on_path()
