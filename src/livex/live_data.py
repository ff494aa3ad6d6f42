"""LiveData: an observable value holder bound to observer lifetimes.

Each registered observer is paired with a Lifetime. The holder notifies the
observer when:
1. the observation starts and the lifetime is observing,
2. the lifetime moves from not observing to observing,
3. the value changes while the lifetime is observing.

An observer is detached automatically when its lifetime terminates.

Every commit bumps a version counter; each observer remembers the last
version it saw, so it is notified at most once per version and catches up
exactly once when it becomes active again.

Not thread-safe: all calls are expected on one thread. Use post_value() with
a DeferredPoster to commit from elsewhere.
"""

from __future__ import annotations

import logging
import types
from typing import Callable, Generic, Protocol, TypeVar, Union, runtime_checkable

from livex.errors import InvalidRegistration
from livex.lifetime import FOREVER, Lifetime
from livex import poster as _poster

logger = logging.getLogger("livex.live_data")

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

START_VERSION = -1

_ABSENT = object()


@runtime_checkable
class Observer(Protocol[T_contra]):
    def on_changed(self, value: T_contra | None) -> None:
        """Called with the current value when it changes."""


ObserverLike = Union[Observer, Callable[[object], None]]


def _identity(observer: ObserverLike) -> object:
    """Registry key for observer: object identity, or receiver plus function for bound methods.

    `log.append` builds a new method object on every access, so identity alone
    would never match it again.
    """
    if isinstance(observer, (types.MethodType, types.BuiltinMethodType)):
        receiver = getattr(observer, "__self__", None)
        if receiver is not None:
            func = getattr(observer, "__func__", None)
            return (id(receiver), id(func) if func is not None else observer.__name__)
    return id(observer)


class _ObserverWrapper:
    """Binds one observer to one lifetime and tracks its delivery progress."""

    __slots__ = ("_holder", "owner", "observer", "active", "attached", "last_version")

    def __init__(self, holder: LiveData, owner: Lifetime, observer: ObserverLike) -> None:
        self._holder = holder
        self.owner = owner
        self.observer = observer
        self.active = False
        self.attached = True
        self.last_version = START_VERSION

    def on_lifetime_change(self) -> None:
        if not self.attached:
            return
        if self.owner.is_terminated():
            logger.debug("Lifetime of %r terminated, detaching", self.observer)
            self._holder.remove_observer(self.observer)
            return
        now = self.owner.is_observing()
        if now == self.active:
            return
        self.active = now
        if now:
            self._holder._dispatch(self)

    def notify(self, value) -> None:
        on_changed = getattr(self.observer, "on_changed", None)
        if on_changed is not None:
            on_changed(value)
        else:
            self.observer(value)


class LiveData(Generic[T]):
    """Read-only view of a lifetime-aware observable value.

    Expose LiveData from data sources and keep the MutableLiveData private,
    so only the owner can change the value.

    Without an initial value the holder starts absent at version -1. With one,
    it starts at version 0, so observers receive that value when they first
    become active.
    """

    __slots__ = (
        "_value",
        "_version",
        "_poster",
        "_observers",
        "_dispatching",
        "_dispatch_invalidated",
    )

    def __init__(self, value: T | None = _ABSENT, poster: _poster.DeferredPoster | None = None) -> None:
        if value is _ABSENT:
            self._value = None
            self._version = START_VERSION
        else:
            self._value = value
            self._version = START_VERSION + 1
        self._poster = poster if poster is not None else _poster.get_default_poster()
        # observer identity -> wrapper, in registration order
        self._observers: dict[object, _ObserverWrapper] = {}
        self._dispatching = False
        self._dispatch_invalidated = False

    # --- Reads ---

    def get_value(self) -> T | None:
        return self._value

    @property
    def version(self) -> int:
        """Number of commits minus one. -1 until the first value is set."""
        return self._version

    def has_observers(self) -> bool:
        return bool(self._observers)

    def has_active_observers(self) -> bool:
        return any(wrapper.active for wrapper in self._observers.values())

    # --- Registration ---

    def observe(self, owner: Lifetime, observer: ObserverLike) -> None:
        """Observe the value for as long as owner lives.

        No-op if owner is already terminated, or if observer is already bound
        to owner. Raises InvalidRegistration if observer is bound to another
        lifetime.
        """
        if owner.is_terminated():
            return
        existing = self._observers.get(_identity(observer))
        if existing is not None:
            if existing.owner is not owner:
                logger.debug("Rejected rebind of %r to %r", observer, owner)
                raise InvalidRegistration("cannot rebind observer to a different lifetime")
            return
        wrapper = _ObserverWrapper(self, owner, observer)
        self._observers[_identity(observer)] = wrapper
        logger.debug("Observing %r with %r", observer, owner)
        owner.add_listener(wrapper)
        wrapper.on_lifetime_change()

    def observe_forever(self, observer: ObserverLike) -> None:
        """Observe until remove_observer() is called."""
        self.observe(FOREVER, observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        """Stop notifying observer. No-op if it is not registered."""
        wrapper = self._observers.pop(_identity(observer), None)
        if wrapper is None:
            return
        # Stale snapshots (a running pass, a lifetime mid-notify) must skip it.
        wrapper.attached = False
        wrapper.active = False
        wrapper.owner.remove_listener(wrapper)
        logger.debug("Removed %r", observer)

    # --- Commits ---

    def _set_value(self, value: T | None) -> None:
        self._version += 1
        self._value = value
        self._dispatch(None)

    def _post_value(self, value: T | None) -> None:
        if self._poster is not None:
            self._poster.post_value(value, self._set_value)
        else:
            self._set_value(value)

    # --- Dispatch ---

    def _dispatch(self, initiator: _ObserverWrapper | None) -> None:
        """Deliver the current version to initiator, or to every wrapper if None.

        Reentrant requests (from inside an observer callback or a nested
        lifetime transition) only mark the running dispatch invalidated; the
        running loop then restarts as a full broadcast.
        """
        if self._dispatching:
            self._dispatch_invalidated = True
            return

        self._dispatching = True
        try:
            while True:
                self._dispatch_invalidated = False
                if initiator is not None:
                    self._consider_notify(initiator)
                    initiator = None
                else:
                    for wrapper in list(self._observers.values()):
                        self._consider_notify(wrapper)
                        if self._dispatch_invalidated:
                            break
                if not self._dispatch_invalidated:
                    break
        finally:
            self._dispatching = False
            self._dispatch_invalidated = False

    def _consider_notify(self, wrapper: _ObserverWrapper) -> None:
        if not wrapper.active:
            return
        if wrapper.owner.is_terminated():
            # Termination was not delivered to this wrapper; detach it now.
            self.remove_observer(wrapper.observer)
            return
        if wrapper.last_version >= self._version:
            return
        wrapper.last_version = self._version
        wrapper.notify(self._value)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._value!r}, version={self._version}, "
            f"observers={len(self._observers)})"
        )


class MutableLiveData(LiveData[T]):
    """LiveData whose value can be changed by whoever holds it."""

    __slots__ = ()

    def set_value(self, value: T | None) -> None:
        """Commit value now and notify every active observer before returning."""
        self._set_value(value)

    def post_value(self, value: T | None) -> None:
        """Commit value through the configured poster, or now if there is none.

        Do not assume the value is visible when this returns.
        """
        self._post_value(value)
