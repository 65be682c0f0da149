"""Dot-path lookup over generic key-value trees.

Used by the condition evaluator and the template interpolator. A path that
cannot be walked resolves to MISSING, which is distinct from a stored None.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Final


class _Missing:
    """Sentinel type for an unresolved path."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


def resolve_path(tree: Mapping[str, Any], path: str) -> Any:
    """Walk `path` ("metadata.amount") through nested mappings.

    Returns MISSING when any segment is absent or an intermediate value is not
    a mapping. Empty segments ("a..b") never resolve.
    """
    current: Any = tree
    for segment in path.split("."):
        if not segment or not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def stringify(value: Any) -> str:
    """Text form of a resolved value (booleans lowercase, integral floats without .0)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)
