"""Errors raised by livex."""


class InvalidRegistration(ValueError):
    """An observer was registered against a second lifetime while still bound to another."""
