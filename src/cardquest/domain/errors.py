"""Exceptions raised by the cardquest engine.

Everything here is recoverable from the caller's side.
"""


class CardquestError(Exception):
    """Base class for all engine errors."""


class InvalidGradeError(CardquestError, ValueError):
    """A quality grade outside 0..5 (or not an int) was passed in."""

    def __init__(self, grade: object):
        self.grade = grade
        super().__init__(f"Quality grade must be an int in 0..5, got {grade!r}")


class InvalidTimezoneError(CardquestError, ValueError):
    """The timezone name could not be resolved."""

    def __init__(self, tz_name: str, reason: str = ""):
        self.tz_name = tz_name
        msg = f"Unknown timezone: {tz_name!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class EmptyDeckError(CardquestError, ValueError):
    """A session was requested for an empty card set."""


class DeckFileError(CardquestError):
    """A deck file could not be read or has the wrong shape."""


class StateFileError(CardquestError):
    """A study-state file could not be read, parsed or written."""
