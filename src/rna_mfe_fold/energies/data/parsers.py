from __future__ import annotations
from typing import Any, Mapping


def get_section(data: Mapping[str, Any], section: str) -> Mapping[str, Any]:
    """
    Return the mapping stored under `section`, or an empty mapping if absent.

    Raises
    ------
    ValueError
        If the section exists but is not a mapping.
    """
    value = data.get(section)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Section '{section}' must be a mapping.")
    return value


def get_float(data: Mapping[str, Any], key: str, default: float) -> float:
    """
    Read a numeric field as float, falling back to `default` when missing.

    Booleans are rejected even though they are `int` subclasses.
    """
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be numeric, got {value!r}.")
    return float(value)


def get_int(data: Mapping[str, Any], key: str, default: int) -> int:
    """Read an integral field, falling back to `default` when missing."""
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer, got {value!r}.")
    return value
