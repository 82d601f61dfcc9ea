from __future__ import annotations

import sys

if sys.version_info >= (3, 11):  # pragma: no cover - stdlib parser
    import tomllib
else:  # pragma: no cover - Python 3.10 fallback
    import tomli as tomllib

__all__ = ["tomllib"]
