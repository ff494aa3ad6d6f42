"""Lifetimes: the external observing/terminated signal an observer is bound to.

A lifetime moves freely between observing and not observing, and reaches
terminated once, irreversibly:

    observing  <--->  not observing
         \\              /
          +--> terminated

Holders only consume this contract. ManualLifetime is a concrete lifetime
driven by explicit calls, for code that owns its own notion of "active".
"""

from __future__ import annotations

import enum
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger("livex.lifetime")


class LifetimeState(enum.Enum):
    OBSERVING = "observing"
    NOT_OBSERVING = "not_observing"
    TERMINATED = "terminated"


@runtime_checkable
class LifetimeListener(Protocol):
    def on_lifetime_change(self) -> None:
        """Called after the lifetime's observing or terminated status changed."""


@runtime_checkable
class Lifetime(Protocol):
    """Something that observes for a period of time and is eventually terminated."""

    def is_observing(self) -> bool: ...

    def is_terminated(self) -> bool: ...

    def add_listener(self, listener: LifetimeListener) -> None: ...

    def remove_listener(self, listener: LifetimeListener) -> None: ...


class _Forever:
    """Always observing, never terminated.

    Observers bound to it are never detached automatically; remove them with
    LiveData.remove_observer().
    """

    __slots__ = ()

    def is_observing(self) -> bool:
        return True

    def is_terminated(self) -> bool:
        return False

    def add_listener(self, listener: LifetimeListener) -> None:
        pass

    def remove_listener(self, listener: LifetimeListener) -> None:
        pass

    def __repr__(self) -> str:
        return "FOREVER"


FOREVER = _Forever()


class ManualLifetime:
    """A lifetime whose state is set by its owner.

    Usage:
        lifetime = ManualLifetime()
        data.observe(lifetime, log.append)   # nothing delivered yet
        lifetime.start()                     # observer catches up
        lifetime.terminate()                 # observer detached for good
    """

    __slots__ = ("_state", "_listeners")

    def __init__(self, state: LifetimeState = LifetimeState.NOT_OBSERVING) -> None:
        if not isinstance(state, LifetimeState):
            raise TypeError(f"expected a LifetimeState, got {state!r}")
        self._state = state
        self._listeners: list[LifetimeListener] = []

    @property
    def state(self) -> LifetimeState:
        return self._state

    def is_observing(self) -> bool:
        return self._state is LifetimeState.OBSERVING

    def is_terminated(self) -> bool:
        return self._state is LifetimeState.TERMINATED

    def add_listener(self, listener: LifetimeListener) -> None:
        if self.is_terminated() or listener in self._listeners:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: LifetimeListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # never added, or already removed

    def start(self) -> None:
        self.move_to(LifetimeState.OBSERVING)

    def stop(self) -> None:
        self.move_to(LifetimeState.NOT_OBSERVING)

    def terminate(self) -> None:
        self.move_to(LifetimeState.TERMINATED)

    def move_to(self, state: LifetimeState) -> None:
        """Transition to state and notify listeners. Ignored once terminated."""
        if not isinstance(state, LifetimeState):
            raise TypeError(f"expected a LifetimeState, got {state!r}")
        if self.is_terminated() or state is self._state:
            return
        logger.debug("Lifetime %s -> %s", self._state.value, state.value)
        self._state = state
        # Snapshot: listeners detach themselves on termination.
        # Every listener hears the change even if an earlier one raises; the
        # first error is re-raised afterwards.
        error = None
        try:
            for listener in list(self._listeners):
                try:
                    listener.on_lifetime_change()
                except Exception as exc:
                    if error is None:
                        error = exc
        finally:
            if state is LifetimeState.TERMINATED:
                self._listeners.clear()
        if error is not None:
            raise error

    def __repr__(self) -> str:
        return f"ManualLifetime({self._state.value}, listeners={len(self._listeners)})"
