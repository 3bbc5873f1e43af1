class SessionTimerError(Exception):
    """Base exception for rejected session timer commands."""

    reason: str = ""

    def __init__(self, message: str, *, reason: str = ""):
        super().__init__(message)
        if reason:
            self.reason = reason


class InvalidArgumentError(SessionTimerError, ValueError):
    """Raised for empty, duplicate, or unknown category names and bad durations."""

    reason = "invalid_argument"


class InvalidTransitionError(SessionTimerError):
    """Raised when a command is not allowed from the current timer state."""
