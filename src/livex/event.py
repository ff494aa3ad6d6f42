"""Event: a value meant to be consumed once and only once.

Useful for one-shot signals carried through LiveData (navigation, toasts),
where an observer catching up after a pause must not act twice.

Usage:
    consume(model.navigate_home, lifetime, lambda target: go(target))

Not thread-safe.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from livex.lifetime import Lifetime
from livex.live_data import LiveData, Observer

T = TypeVar("T")


class Event(Generic[T]):
    __slots__ = ("_value", "_consumed")

    def __init__(self, value: T) -> None:
        self._value = value
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> T | None:
        """Return the value the first time, None afterwards."""
        if self._consumed:
            return None
        self._consumed = True
        return self._value

    def peek(self) -> T:
        """Return the value without consuming it."""
        return self._value

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "pending"
        return f"Event({self._value!r}, {state})"


class _EventObserver(Generic[T]):
    __slots__ = ("_block",)

    def __init__(self, block: Callable[[T], None]) -> None:
        self._block = block

    def on_changed(self, value: Event[T] | None) -> None:
        if value is None:
            return
        content = value.consume()
        if content is not None:
            self._block(content)


def consume(
    live_data: LiveData[Event[T]],
    owner: Lifetime,
    block: Callable[[T], None],
) -> Observer[Event[T]]:
    """Observe live_data for owner, calling block with each unconsumed event.

    Returns the observer so it can be passed to remove_observer().
    """
    observer = _EventObserver(block)
    live_data.observe(owner, observer)
    return observer
