"""Observable state cell.

A value plus an ordered subscriber list. Writing a new value notifies every
subscriber synchronously on the writer's call stack.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Observable(Generic[T]):
    """Single-writer, multi-reader state cell.

    Subscribers are called with the new value, in subscription order, only
    when the written value differs from the current one.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value is self._value or new_value == self._value:
            return
        self._value = new_value
        for callback in list(self._subscribers):
            callback(new_value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a change callback.

        Returns:
            A function that removes the callback. Calling it twice is harmless.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"Observable({self._value!r})"
