"""ViewModel: prepares and holds data for a view across its scope."""

from __future__ import annotations

import logging

logger = logging.getLogger("livex.view_model")


class ViewModel:
    """Base class for objects whose scope ends exactly once.

    Subclasses override on_cleared() to release what they hold (dispose
    observers, cancel work). Whoever owns the scope calls clear().
    """

    def __init__(self) -> None:
        self._cleared = False

    @property
    def cleared(self) -> bool:
        return self._cleared

    def clear(self) -> None:
        """End the scope. on_cleared() runs on the first call only."""
        if self._cleared:
            return
        self._cleared = True
        logger.info("Clearing %s", type(self).__name__)
        self.on_cleared()

    def on_cleared(self) -> None:
        """Called once when the view model is no longer used. Does nothing by default."""
