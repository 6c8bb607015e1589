"""Textual integration for forkx. Opt-in — requires textual.

Guard, NoMatches handling, and thread-marshal live here, not at callsites.
Pause state is owned by this module, keyed by id(app), so apps are never
mutated.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from forkx.subject import Subject, SubjectSubscription

_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded subscriptions during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def subscribe(app, subject: Subject, effect_fn) -> SubjectSubscription:
    """subject.subscribe() that safely bridges to Textual widgets.

    Values pushed while the app is paused or not running are dropped.
    NoMatches from widget queries is swallowed; anything else propagates.
    Values pushed from a background thread go through call_from_thread.

    Only effect_fn is marshaled. The walk over the subject's callbacks
    still runs on whichever thread called next(), so next() must not race
    with subscribe() or unsubscribe() on another thread.
    """
    _main = threading.get_ident()

    def _deliver(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_run_effect, value)
        else:
            _run_effect(value)

    def _run_effect(value):
        try:
            effect_fn(value)
        except NoMatches:
            pass

    return subject.subscribe(_deliver)
