"""Tests for SubjectSubscription — one-shot cancellation of a single entry."""

import logging

from forkx import Subject, Unsubscribe


class TestUnsubscribe:
    def test_doubled_then_unsubscribe(self):
        s = Subject()
        state = {"a": 0}
        sub = s.subscribe(lambda v: state.__setitem__("a", v * 2))
        s.next(1)
        assert state["a"] == 2
        sub.unsubscribe()
        s.next(5)
        assert state["a"] == 2

    def test_unsubscribe_one_of_two(self):
        s = Subject()
        a, b = [], []
        s.subscribe(a.append)
        sub_b = s.subscribe(b.append)
        s.next("x")
        assert a == ["x"]
        assert b == ["x"]
        sub_b.unsubscribe()
        s.next("y")
        assert a == ["x", "y"]
        assert b == ["x"]

    def test_unsubscribe_keeps_remaining_order(self):
        s = Subject()
        log = []
        s.subscribe(lambda v: log.append("a"))
        sub_b = s.subscribe(lambda v: log.append("b"))
        s.subscribe(lambda v: log.append("c"))
        sub_b.unsubscribe()
        s.next(0)
        assert log == ["a", "c"]

    def test_same_callable_unsubscribes_one_entry(self):
        s = Subject()
        received = []
        first = s.subscribe(received.append)
        s.subscribe(received.append)
        first.unsubscribe()
        s.next(1)
        assert received == [1]

    def test_second_unsubscribe_is_noop(self):
        s = Subject()
        received = []
        sub = s.subscribe(received.append)
        sub.unsubscribe()
        other = s.subscribe(received.append)
        sub.unsubscribe()  # should not raise or remove `other`
        s.next(1)
        assert received == [1]
        assert not other.closed

    def test_closed_state(self):
        s = Subject()
        sub = s.subscribe(lambda v: None)
        assert not sub.closed
        sub.unsubscribe()
        assert sub.closed
        assert "unsubscribed" in repr(sub)

    def test_remove_absent_token_is_noop(self):
        s = Subject()
        sub = s.subscribe(lambda v: None)
        s.remove_callback(sub.token)
        s.remove_callback(sub.token)
        sub.unsubscribe()
        assert s.observer_count == 0

    def test_context_manager(self):
        s = Subject()
        received = []
        with s.subscribe(received.append):
            s.next(1)
        s.next(2)
        assert received == [1]

    def test_is_unsubscribe_capability(self):
        sub = Subject().subscribe(lambda v: None)
        assert isinstance(sub, Unsubscribe)


class TestLogging:
    def test_subscribe_and_unsubscribe_logged(self, caplog):
        s = Subject()
        with caplog.at_level(logging.DEBUG, logger="forkx.subject"):
            sub = s.subscribe(lambda v: None)
            sub.unsubscribe()
        assert f"Subscribed token {sub.token}" in caplog.text
        assert f"Removed token {sub.token}" in caplog.text

    def test_stale_removal_logged(self, caplog):
        s = Subject()
        sub = s.subscribe(lambda v: None)
        s.remove_callback(sub.token)
        with caplog.at_level(logging.DEBUG, logger="forkx.subject"):
            s.remove_callback(sub.token)
        assert "already removed" in caplog.text
