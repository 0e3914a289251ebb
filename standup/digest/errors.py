"""Errors raised by the standup digest engine."""

from __future__ import annotations


class StandupError(Exception):
    """Base class for standup digest errors."""


class InvalidTimeError(StandupError, ValueError):
    """Raised when a digest time falls outside 00:00 to 23:59.

    Attributes
    ----------
    hour
        Rejected hour value.
    minute
        Rejected minute value.

    """

    def __init__(self, hour: int, minute: int) -> None:
        """Initialise with the rejected hour and minute."""
        self.hour = hour
        self.minute = minute
        super().__init__(
            "Invalid time. Hour must be between 0-23 and minute between 0-59 "
            f"(got {hour}:{minute:02d})."
        )


class NoDestinationConfiguredError(StandupError):
    """Raised when a digest is attempted before a destination is set."""

    def __init__(self) -> None:
        """Initialise with a fixed operator-facing message."""
        super().__init__("No summary channel set.")


class SendError(StandupError):
    """Raised when every delivery attempt for a digest has failed.

    The last transport error is available both as ``last_error`` and as
    the exception's ``__cause__``.

    Attributes
    ----------
    attempts
        Number of delivery attempts made.
    last_error
        Transport error raised by the final attempt.

    """

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        """Initialise with the attempt count and final transport error."""
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to send digest after {attempts} attempt(s): {last_error}"
        )


class PersistenceError(StandupError):
    """Raised when the state snapshot cannot be written."""

    @classmethod
    def write_failed(cls, path: object, detail: str) -> PersistenceError:
        """Create an error for a failed snapshot write."""
        return cls(f"Failed to write data file {path}: {detail}")


class MalformedSnapshotError(StandupError):
    """Raised when a persisted snapshot cannot be decoded.

    Callers loading state at startup treat this as "no snapshot" and fall
    back to defaults.
    """

    def __init__(self, detail: str) -> None:
        """Initialise with the decoder's description of the problem."""
        self.detail = detail
        super().__init__(f"Malformed state snapshot: {detail}")
