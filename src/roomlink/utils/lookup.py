from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def rough_match(items: Iterable[T], name: str, key: Callable[[T], str]) -> T | None:
    """Return the first item whose name equals ``name``.

    Falls back to the first case-insensitive match when no exact match
    exists.
    """
    folded = name.casefold()
    rough: T | None = None
    for item in items:
        candidate = key(item)
        if candidate == name:
            return item
        if rough is None and candidate.casefold() == folded:
            rough = item
    return rough
