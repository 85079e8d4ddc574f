"""Partial-update payloads.

``changed_fields`` compares a saved snapshot of an entity with its edited
copy and keeps only the attributes whose values differ, so the store's
``update`` receives the smallest possible change-set.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality that ignores mapping key order but not value types.

    ``"5"`` and ``5`` differ, as do ``True`` and ``1`` or ``1`` and ``1.0``.
    Lists and tuples are both treated as ordered arrays.
    """
    a, b = _plain(a), _plain(b)

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[k], b[k]) for k in a)

    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if not (isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    return type(a) is type(b) and a == b


def changed_fields(original: Mapping[str, Any], current: Mapping[str, Any]) -> dict[str, Any]:
    """Keys of ``current`` whose value differs from ``original``.

    Keys present only in ``original`` are not reported; removals are not part
    of a partial update. A key missing from ``original`` is reported whatever
    its value, ``None`` included. An empty result means there is nothing to save.
    """
    return {
        key: value
        for key, value in current.items()
        if key not in original or not deep_equal(original[key], value)
    }


__all__ = ["changed_fields", "deep_equal"]
