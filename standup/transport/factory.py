"""Factory for creating MessageSender implementations from the environment."""

from __future__ import annotations

import os
import typing as typ

from standup.transport.errors import SenderConfigError
from standup.transport.log_sender import LoggingMessageSender

if typ.TYPE_CHECKING:
    from standup.transport.protocol import MessageSender

_VALID_BACKENDS = frozenset({"discord", "log"})


def create_message_sender() -> MessageSender:
    """Create a MessageSender based on ``STANDUP_SENDER_BACKEND``.

    ``log`` returns a :class:`LoggingMessageSender`. ``discord`` builds a
    :class:`~standup.transport.discord.DiscordMessageSender` from
    :meth:`DiscordSenderConfig.from_env`.

    Raises
    ------
    SenderConfigError
        If the backend is unset or unknown, or the Discord configuration
        is incomplete.

    Examples
    --------
    >>> import os
    >>> os.environ["STANDUP_SENDER_BACKEND"] = "log"
    >>> isinstance(create_message_sender(), LoggingMessageSender)
    True

    """
    raw_backend = os.environ.get("STANDUP_SENDER_BACKEND")
    if raw_backend is None:
        raise SenderConfigError.missing_backend()

    backend = raw_backend.strip().lower()
    if backend not in _VALID_BACKENDS:
        raise SenderConfigError.invalid_backend(raw_backend)

    if backend == "log":
        return LoggingMessageSender()

    from standup.transport.config import DiscordSenderConfig
    from standup.transport.discord import DiscordMessageSender

    return DiscordMessageSender(DiscordSenderConfig.from_env())
