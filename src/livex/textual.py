"""Textual integration for livex. Opt-in, requires textual.

// [LAW:locality-or-seam] Textual coupling isolated in this module, core livex stays agnostic.
// [LAW:single-enforcer] Thread marshaling for posted values is decided here, not at callsites.
"""

from __future__ import annotations

import threading

from textual import events

from livex.lifetime import ManualLifetime


class AppPoster:
    """Deferred poster that commits values on a Textual app's thread.

    Construct it on the app's thread (e.g. in App.on_mount). Posts from that
    thread run after pending messages via call_later; posts from any other
    thread are marshaled with call_from_thread.
    """

    __slots__ = ("_app", "_main")

    def __init__(self, app) -> None:
        self._app = app
        self._main = threading.get_ident()

    def post_value(self, value, commit) -> None:
        if threading.get_ident() != self._main:
            self._app.call_from_thread(commit, value)
        else:
            self._app.call_later(commit, value)


class WidgetLifetime:
    """Widget mixin exposing a lifetime that follows the widget on screen.

    Observing while shown, not observing while hidden, terminated on unmount.

    Usage:
        class Clock(WidgetLifetime, Static):
            def on_mount(self) -> None:
                model.time.observe(self.lifetime, self.update)
    """

    @property
    def lifetime(self) -> ManualLifetime:
        lifetime = getattr(self, "_livex_lifetime", None)
        if lifetime is None:
            lifetime = ManualLifetime()
            self._livex_lifetime = lifetime
        return lifetime

    def _on_show(self, event: events.Show) -> None:
        self.lifetime.start()

    def _on_hide(self, event: events.Hide) -> None:
        self.lifetime.stop()

    def _on_unmount(self, event: events.Unmount) -> None:
        self.lifetime.terminate()
