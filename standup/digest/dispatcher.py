"""Digest delivery with bounded retry.

The dispatcher wraps a :class:`~standup.transport.protocol.MessageSender`.
Transport failures are retried after a fixed backoff until the attempt
budget is spent; a missing destination is reported at once without
touching the transport. The dispatcher never mutates the entry store;
clearing after a successful send is the caller's job.

Usage
-----
>>> dispatcher = Dispatcher(sender, max_attempts=3, backoff_s=5.0)
>>> attempts = await dispatcher.send("123456789", digest_text)

"""

from __future__ import annotations

import asyncio
import typing as typ

from standup.digest.errors import NoDestinationConfiguredError, SendError
from standup.transport.errors import TransportError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from standup.digest.observability import DigestEventLogger
    from standup.transport.protocol import MessageSender

Sleeper: typ.TypeAlias = "cabc.Callable[[float], cabc.Awaitable[None]]"


class Dispatcher:
    """Send digests through a message sender, retrying transport failures.

    Parameters
    ----------
    sender
        Transport used for each attempt.
    max_attempts
        Total attempts including the first. Must be at least 1.
    backoff_s
        Delay before every attempt after the first.
    event_logger
        Optional structured logger notified before each retry.
    sleep
        Awaitable sleep function; tests substitute a recorder.

    """

    def __init__(
        self,
        sender: MessageSender,
        *,
        max_attempts: int = 3,
        backoff_s: float = 5.0,
        event_logger: DigestEventLogger | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Configure the dispatcher."""
        if max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {max_attempts}"
            raise ValueError(msg)
        self._sender = sender
        self._max_attempts = max_attempts
        self._backoff_s = backoff_s
        self._event_logger = event_logger
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Return the total attempt budget per digest."""
        return self._max_attempts

    async def send(self, destination: str | None, text: str) -> int:
        """Deliver ``text`` to ``destination``.

        Parameters
        ----------
        destination
            Destination identity, or ``None`` when none is configured.
        text
            Composed digest.

        Returns
        -------
        int
            The attempt number that succeeded (1 on first-try success).

        Raises
        ------
        NoDestinationConfiguredError
            If ``destination`` is ``None``; no attempt is made.
        SendError
            If every attempt raised a transport error. The last error is
            chained as ``__cause__``.

        """
        if destination is None:
            raise NoDestinationConfiguredError

        last_error: TransportError | None = None
        for attempt in range(1, self._max_attempts + 1):
            if attempt > 1:
                await self._sleep(self._backoff_s)
            try:
                await self._sender.send_message(destination, text)
            except TransportError as exc:
                last_error = exc
                self._report_retry(attempt, exc)
            else:
                return attempt

        if last_error is None:  # pragma: no cover - loop runs at least once
            msg = "dispatcher made no delivery attempts"
            raise RuntimeError(msg)
        raise SendError(self._max_attempts, last_error) from last_error

    def _report_retry(self, attempt: int, error: TransportError) -> None:
        if self._event_logger is None or attempt >= self._max_attempts:
            return
        self._event_logger.log_send_retrying(
            attempt=attempt,
            max_attempts=self._max_attempts,
            delay_s=self._backoff_s,
            error=error,
        )
