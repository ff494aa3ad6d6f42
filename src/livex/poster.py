"""Deferred posters: where a posted value is actually committed.

MutableLiveData.post_value() hands (value, commit) to a poster, which must
eventually call commit(value) exactly once on whatever thread or loop it
chooses. The dispatch engine never knows which.

Configure once for the process:
    livex.set_default_poster(AsyncioPoster(loop))

Holders created afterwards without an explicit poster pick it up.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

Commit = Callable[[T], None]


@runtime_checkable
class DeferredPoster(Protocol[T]):
    def post_value(self, value: T | None, commit: Commit) -> None:
        """Arrange for commit(value) to run later, exactly once."""


class SynchronousPoster:
    """Commits immediately on the calling thread. Useful in tests."""

    __slots__ = ()

    def post_value(self, value, commit: Commit) -> None:
        commit(value)


class SchedulerPoster:
    """Adapts a scheduler callable taking a zero-arg function.

    Usage:
        SchedulerPoster(loop.call_soon_threadsafe)
        SchedulerPoster(app.call_from_thread)
    """

    __slots__ = ("_scheduler",)

    def __init__(self, scheduler: Callable[[Callable[[], None]], object]) -> None:
        self._scheduler = scheduler

    def post_value(self, value, commit: Commit) -> None:
        self._scheduler(lambda v=value: commit(v))


class AsyncioPoster:
    """Commits on the next cycle of an asyncio event loop.

    Safe to call from any thread. Without an explicit loop, the running loop
    at construction time is used.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    def post_value(self, value, commit: Commit) -> None:
        self._loop.call_soon_threadsafe(commit, value)


# ─── Process-wide default ───────────────────────────────────────────────────
_default_poster: DeferredPoster | None = None


def set_default_poster(poster: DeferredPoster | None) -> None:
    """Set the poster used by holders created without one. None commits immediately."""
    global _default_poster
    _default_poster = poster


def get_default_poster() -> DeferredPoster | None:
    return _default_poster
