"""
Observable value holder.

Stores (session, profile, balance, navigation decision) expose their
current value through an Observable so that consumers re-evaluate
synchronously on every change instead of polling.
"""

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """
    A value plus the listeners interested in it.

    Listeners are called synchronously, in subscription order, each time
    the value is set. A listener added while a notification is running
    is first called on the next change.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener] = []

    @property
    def value(self) -> T:
        """Current value."""
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify every listener."""
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a listener.

        Returns:
            A callable that removes the listener. Calling it twice is a no-op.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
