"""MessageSender protocol for delivering digest text.

This is the port through which the dispatcher reaches a chat platform.
Adapters raise :class:`~standup.transport.errors.TransportError` for
failures that are worth retrying; any other exception is treated as a
programming or configuration fault and is not retried.

Usage
-----
>>> from standup.transport import LoggingMessageSender, MessageSender
>>> isinstance(LoggingMessageSender(), MessageSender)
True

"""

from __future__ import annotations

import typing as typ


@typ.runtime_checkable
class MessageSender(typ.Protocol):
    """Protocol for sending a message to a destination channel."""

    async def send_message(self, destination: str, text: str) -> None:
        """Deliver ``text`` to ``destination``.

        Implementations must be safe to call again with the same arguments
        after a failure.

        Parameters
        ----------
        destination
            Opaque destination identity (for Discord, a channel ID).
        text
            Message body.

        Raises
        ------
        TransportError
            If delivery failed and may succeed on a later attempt.

        """
        ...
