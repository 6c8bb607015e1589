"""Subject — a broadcast node that is both an Observable and an Observer.

A Subject fans every value pushed through next() out to all of its current
subscribers, synchronously and in registration order. Subject instances are
thin handles: clone() returns a new handle over the same CallbackRegistry,
so subscribing through one handle and pushing through another behaves as if
a single handle were used.

Delivery works on a snapshot of the registry taken when next() starts.
Callbacks added during a pass wait for the next value. Callbacks removed
during a pass are skipped if they have not been reached yet.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from forkx._registry import CallbackRegistry
from forkx.observable import Observable, Observer

T = TypeVar("T")

logger = logging.getLogger("forkx.subject")


def _as_callback(observer: Any) -> Callable[[Any], None]:
    """Accept a plain callable or anything with a next() method."""
    if callable(observer):
        return observer
    if isinstance(observer, Observer):
        return observer.next
    raise TypeError(
        f"subscribe() expects a callable or an object with next(), "
        f"got {type(observer).__name__}"
    )


class Subject(Generic[T]):
    """Multicast value channel. Handles produced by clone() share callbacks."""

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        self._callbacks: CallbackRegistry[T] = CallbackRegistry()

    @classmethod
    def from_stream(cls, stream: Observable[T]) -> Subject[T]:
        """Fork a single-subscriber stream so many observers can share it.

        The forwarding subscription on ``stream`` is kept internal: it stays
        attached for as long as the upstream keeps emitting.

        Usage:
            source = EventStream()
            shared = Subject.from_stream(source)
            shared.subscribe(lambda v: print("a", v))
            shared.subscribe(lambda v: print("b", v))
            source.emit(1)  # both print
        """
        broadcast = cls()
        relay = broadcast.clone()

        def _forward(item: T) -> None:
            relay.next(item)

        stream.subscribe(_forward)
        logger.debug("Forked %r into %r", stream, broadcast)
        return broadcast

    def clone(self) -> Subject[T]:
        """Return a new handle sharing this subject's callbacks."""
        other = object.__new__(type(self))
        other._callbacks = self._callbacks
        return other

    __copy__ = clone

    def shares_registry(self, other: Subject) -> bool:
        """Do both handles refer to the same broadcast channel?"""
        return self._callbacks is other._callbacks

    # --- Observable side ---

    def subscribe(self, observer: Callable[[T], None] | Observer[T]) -> SubjectSubscription[T]:
        """Register an observer. Returns a handle that removes exactly this entry.

        Subscribing the same callable twice creates two independent entries.
        """
        token = self._callbacks.add(_as_callback(observer))
        logger.debug(
            "Subscribed token %d (%d callbacks)", token, len(self._callbacks)
        )
        return SubjectSubscription(self, token)

    def remove_callback(self, token: int) -> None:
        """Remove the callback registered under token. Absent token is a no-op."""
        if self._callbacks.remove(token):
            logger.debug(
                "Removed token %d (%d callbacks)", token, len(self._callbacks)
            )
        else:
            logger.debug("Token %d already removed", token)

    # --- Observer side ---

    def next(self, value: T) -> Subject[T]:
        """Deliver value to every registered callback, in order. Returns self.

        Exceptions raised by a callback propagate and stop the pass.
        """
        registry = self._callbacks
        for token, callback in registry.snapshot():
            if token in registry:
                callback(value)
        return self

    @property
    def observer_count(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Subject({len(self._callbacks)} observers)"


class SubjectSubscription(Generic[T]):
    """Cancellation handle for one Subject registration.

    Registered -> Unsubscribed. Only the first unsubscribe() has an effect.
    Also usable as a context manager that unsubscribes on exit.
    """

    __slots__ = ("_source", "_token")

    def __init__(self, source: Subject[T], token: int) -> None:
        self._source: Subject[T] | None = source
        self._token = token

    @property
    def token(self) -> int:
        return self._token

    @property
    def closed(self) -> bool:
        return self._source is None

    def unsubscribe(self) -> None:
        source = self._source
        if source is None:
            return
        self._source = None
        source.remove_callback(self._token)

    def __enter__(self) -> SubjectSubscription[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        state = "unsubscribed" if self._source is None else "registered"
        return f"SubjectSubscription({self._token}, {state})"
