"""Message transports that deliver digests to a destination channel.

Public API
----------
MessageSender
    Protocol (port) for sending a text message to a destination.
DiscordMessageSender
    Discord REST adapter built on ``httpx``.
DiscordSenderConfig
    Configuration for the Discord adapter.
LoggingMessageSender
    Adapter that writes messages to the log instead of a platform.
TransportError
    Base class for retryable delivery failures.
create_message_sender
    Build a sender from ``STANDUP_SENDER_BACKEND``.

"""

from standup.transport.config import DiscordSenderConfig
from standup.transport.discord import DiscordMessageSender
from standup.transport.errors import (
    DiscordAPIError,
    SenderConfigError,
    TransportError,
)
from standup.transport.factory import create_message_sender
from standup.transport.log_sender import LoggingMessageSender
from standup.transport.protocol import MessageSender

__all__ = [
    "DiscordAPIError",
    "DiscordMessageSender",
    "DiscordSenderConfig",
    "LoggingMessageSender",
    "MessageSender",
    "SenderConfigError",
    "TransportError",
    "create_message_sender",
]
