"""Errors raised by message transports."""

from __future__ import annotations


class TransportError(Exception):
    """Base class for delivery failures that may succeed on retry."""


class DiscordAPIError(TransportError):
    """Raised when the Discord API rejects or fails a request.

    Attributes
    ----------
    status_code
        HTTP status code from the response, if one was received.
    retry_after
        Seconds Discord asked the client to wait, for rate-limited calls.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        """Initialise with a message and optional response details."""
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> DiscordAPIError:
        """Create an error for a non-success HTTP response."""
        msg = f"Discord API HTTP error {status_code}"
        if detail:
            msg = f"{msg}: {detail}"
        return cls(msg, status_code=status_code)

    @classmethod
    def rate_limited(cls, retry_after: float | None = None) -> DiscordAPIError:
        """Create an error for a 429 response."""
        msg = "Discord API rate limited"
        if retry_after is not None:
            msg = f"{msg}, retry after {retry_after}s"
        return cls(msg, status_code=429, retry_after=retry_after)

    @classmethod
    def timeout(cls) -> DiscordAPIError:
        """Create an error for a request that timed out."""
        return cls("Discord API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> DiscordAPIError:
        """Create an error for DNS, connection or TLS failures."""
        return cls(f"Discord API network error: {detail}")


class SenderConfigError(Exception):
    """Raised when a message sender cannot be configured from the environment."""

    @classmethod
    def missing_backend(cls) -> SenderConfigError:
        """Create an error for an unset backend selector."""
        return cls(
            "STANDUP_SENDER_BACKEND is required; set it to 'discord' or 'log'."
        )

    @classmethod
    def invalid_backend(cls, value: str) -> SenderConfigError:
        """Create an error for an unknown backend name."""
        return cls(
            f"Invalid STANDUP_SENDER_BACKEND {value!r}; expected 'discord' or 'log'."
        )

    @classmethod
    def missing_token(cls) -> SenderConfigError:
        """Create an error for a missing Discord bot token."""
        return cls("Missing Discord bot token; set STANDUP_DISCORD_TOKEN.")

    @classmethod
    def invalid_timeout(cls, value: str) -> SenderConfigError:
        """Create an error for a non-positive or non-numeric timeout."""
        return cls(
            f"STANDUP_DISCORD_TIMEOUT_S must be a positive number, got: {value!r}"
        )
