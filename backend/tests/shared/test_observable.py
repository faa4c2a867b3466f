"""Tests for shared/observable.py."""

from shared.observable import Observable


class TestObservable:
    def test_initial_value(self):
        assert Observable(3).value == 3

    def test_set_notifies_in_order(self):
        seen = []
        observable = Observable(0)
        observable.subscribe(lambda v: seen.append(("a", v)))
        observable.subscribe(lambda v: seen.append(("b", v)))

        observable.set(1)

        assert observable.value == 1
        assert seen == [("a", 1), ("b", 1)]

    def test_unsubscribe(self):
        seen = []
        observable = Observable(0)
        unsubscribe = observable.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        observable.set(5)

        assert seen == []
        assert observable.listener_count == 0

    def test_listener_added_during_notification_waits_for_next_change(self):
        seen = []
        observable = Observable(0)

        def first(value):
            observable.subscribe(seen.append)

        observable.subscribe(first)
        observable.set(1)
        assert seen == []

        observable.set(2)
        assert seen == [2]
