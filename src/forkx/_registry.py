"""Callback registry — the shared store behind every Subject handle.

Entries live in an insertion-ordered dict keyed by an integer token.
Tokens come from a process-wide counter and are never reused, so a token
held by a stale subscription can never match a different live callback.
"""

from __future__ import annotations

import itertools
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Callback = Callable[[T], None]

# itertools.count is thread-safe (C-level GIL atomic)
_token_counter = itertools.count(1)


def new_token() -> int:
    return next(_token_counter)


class CallbackRegistry(Generic[T]):
    """Ordered slot map of callbacks keyed by token."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[int, Callback[T]] = {}

    def add(self, callback: Callback[T]) -> int:
        """Append callback. Returns the token that identifies this entry."""
        token = new_token()
        self._entries[token] = callback
        return token

    def remove(self, token: int) -> bool:
        """Remove the entry for token. Returns False if it was already gone."""
        return self._entries.pop(token, None) is not None

    def snapshot(self) -> list[tuple[int, Callback[T]]]:
        """Current entries in registration order."""
        return list(self._entries.items())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"CallbackRegistry({len(self._entries)} callbacks)"
