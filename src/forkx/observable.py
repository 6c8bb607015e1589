"""Capability protocols shared by sources, sinks, and subscription handles.

Anything with a matching ``subscribe`` can feed a Subject, and anything with
a matching ``next`` can be subscribed to one. These are structural types:
no base class is required.
"""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class Unsubscribe(Protocol):
    """A cancellation handle returned by subscribe()."""

    def unsubscribe(self) -> None: ...


@runtime_checkable
class Observable(Protocol[T_co]):
    """A push-based source of items."""

    def subscribe(self, observer: Callable[[T_co], None]) -> Unsubscribe: ...


@runtime_checkable
class Observer(Protocol[T_contra]):
    """A sink that accepts items via next(). Returns self for chaining."""

    def next(self, item: T_contra) -> Observer[T_contra]: ...
