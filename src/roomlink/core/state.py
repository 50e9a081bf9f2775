"""Lazily computed values that stay cached until invalidated."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Stale:
    pass


@dataclass(frozen=True)
class Resolved(Generic[T]):
    value: T


class Memo(Generic[T]):
    """Holds either ``Stale()`` or ``Resolved(value)``.

    ``get`` computes the value on first use; ``invalidate`` returns the
    holder to ``Stale`` so the next ``get`` computes it again.
    """

    def __init__(self) -> None:
        self._state: Stale | Resolved[T] = Stale()

    @property
    def state(self) -> Stale | Resolved[T]:
        return self._state

    @property
    def resolved(self) -> bool:
        return isinstance(self._state, Resolved)

    def get(self, compute: Callable[[], T]) -> T:
        state = self._state
        if isinstance(state, Resolved):
            return state.value
        value = compute()
        self._state = Resolved(value)
        return value

    def set(self, value: T) -> T:
        self._state = Resolved(value)
        return value

    def peek(self) -> T | None:
        state = self._state
        return state.value if isinstance(state, Resolved) else None

    def invalidate(self) -> None:
        self._state = Stale()
