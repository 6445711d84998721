"""Shared helpers for reading kubernetes SDK objects."""

from __future__ import annotations

from typing import Any


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Safely traverse nested attributes on kubernetes SDK objects."""
    current = obj
    for attr in attrs:
        if current is None:
            return default
        current = getattr(current, attr, None)
    return current if current is not None else default


def _get_name(obj: Any) -> str | None:
    """Extract ``metadata.name``, returning None if unset or empty."""
    name = _safe_get(obj, "metadata", "name")
    return name or None
