"""Error taxonomy for times_drill."""

__all__ = [
    "TimesDrillError",
    "InvalidInputError",
    "CorruptedPersistedStateError",
    "InvariantViolationError",
]


class TimesDrillError(Exception):
    """Base class for all drill errors."""


class InvalidInputError(TimesDrillError, ValueError):
    """Submitted answer is empty or not a number.

    The scheduler state is left untouched and no turn is consumed.
    """

    def __init__(self, raw_input: str, reason: str = "Please enter a number.") -> None:
        super().__init__(reason)
        self.raw_input = raw_input
        self.reason = reason


class CorruptedPersistedStateError(TimesDrillError):
    """A saved session record is malformed or expired.

    Stores catch this and behave as if nothing was saved.
    """


class InvariantViolationError(TimesDrillError):
    """An action was requested that the current phase does not allow."""
