"""forkx: fork push-based streams into multi-subscriber Subjects."""

from importlib.metadata import version as _version

__version__ = _version("forkx")

from forkx.observable import Observable, Observer, Unsubscribe
from forkx.subject import Subject, SubjectSubscription
from forkx.stream import EventStream, StreamSubscription, from_iterable
# textual NOT auto-imported — opt-in only

__all__ = [
    "Observable",
    "Observer",
    "Unsubscribe",
    "Subject",
    "SubjectSubscription",
    "EventStream",
    "StreamSubscription",
    "from_iterable",
]
