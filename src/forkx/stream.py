"""Push-based event streams — upstream sources for Subject.from_stream().

EventStream is a hot source: values pushed with emit() reach whoever is
subscribed at that moment. Each operator returns a new stream (immutable
chain), and dispose() tears down the whole downstream chain.

from_iterable() is a cold source: every subscriber gets the full sequence,
pushed synchronously during subscribe().
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, TypeVar

from forkx._registry import CallbackRegistry

T = TypeVar("T")
U = TypeVar("U")


class StreamSubscription:
    """Removes one callback from an EventStream. Safe to call repeatedly."""

    __slots__ = ("_stream", "_token")

    def __init__(self, stream: EventStream | None, token: int) -> None:
        self._stream = stream
        self._token = token

    @property
    def closed(self) -> bool:
        return self._stream is None

    def unsubscribe(self) -> None:
        if self._stream is not None:
            self._stream._subscribers.remove(self._token)
            self._stream = None


class EventStream(Generic[T]):
    """Push-based event stream with operator chaining."""

    def __init__(self) -> None:
        self._subscribers: CallbackRegistry[T] = CallbackRegistry()
        self._children: list[EventStream] = []  # downstream streams for dispose
        self._disposed = False
        self._parent_link: StreamSubscription | None = None
        self._parent: EventStream | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def emit(self, value: T) -> None:
        """Push a value to all subscribers."""
        if self._disposed:
            return
        for token, cb in self._subscribers.snapshot():
            if token in self._subscribers:
                cb(value)

    def subscribe(self, callback: Callable[[T], None]) -> StreamSubscription:
        """Register a callback. Returns a handle that removes it."""
        if self._disposed:
            return StreamSubscription(None, 0)
        return StreamSubscription(self, self._subscribers.add(callback))

    def map(self, fn: Callable[[T], U]) -> EventStream[U]:
        """Transform events through fn."""
        child: EventStream[U] = EventStream()
        self._attach(child, lambda v: child.emit(fn(v)))
        return child

    def filter(self, fn: Callable[[T], bool]) -> EventStream[T]:
        """Only pass events where fn returns True."""
        child: EventStream[T] = EventStream()
        self._attach(child, lambda v: child.emit(v) if fn(v) else None)
        return child

    def dispose(self) -> None:
        """Tear down this stream and all downstream children."""
        self._disposed = True
        self._subscribers.clear()
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        if self._parent is not None:
            if self in self._parent._children:
                self._parent._children.remove(self)
            self._parent = None
        if self._parent_link is not None:
            self._parent_link.unsubscribe()
            self._parent_link = None

    def _attach(self, child: EventStream, relay: Callable[[T], None]) -> None:
        """Wire child to this stream so dispose() propagates both ways."""
        self._children.append(child)
        child._parent = self
        child._parent_link = self.subscribe(relay)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._subscribers)} subscribers"
        return f"EventStream({state})"


class _IterableSource(Generic[T]):
    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T]) -> None:
        self._items: tuple[T, ...] = tuple(items)

    def subscribe(self, callback: Callable[[T], None]) -> StreamSubscription:
        for item in self._items:
            callback(item)
        return StreamSubscription(None, 0)

    def __repr__(self) -> str:
        return f"from_iterable({self._items!r})"


def from_iterable(items: Iterable[T]) -> _IterableSource[T]:
    """Cold source that pushes every item to each new subscriber, then completes.

    items is read once, up front, so generators replay like lists.

    Usage:
        shared = Subject.from_stream(from_iterable([1, 2, 3]))
        # items were pushed during from_stream, before anyone subscribed
    """
    return _IterableSource(items)
