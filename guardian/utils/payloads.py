"""Helpers for reading loosely typed upstream JSON payloads."""

from __future__ import annotations

from typing import Any, Mapping


def pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key wins, so camelCase and snake_case spellings both work."""
    for key in keys:
        if key in payload:
            return payload[key]
    return default


def string_tuple(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item) for item in raw if item is not None)
