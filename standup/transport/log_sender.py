"""Message sender that writes digests to the log.

Used for local runs and demos where no chat platform is configured.
"""

from __future__ import annotations

from standup.logging import get_logger, log_info

logger = get_logger(__name__)


class LoggingMessageSender:
    """Write each message to the ``standup.transport.log_sender`` logger.

    Delivered messages are also kept in :attr:`sent` so a local operator
    (or a test) can inspect what would have been posted.
    """

    def __init__(self) -> None:
        """Initialise an empty record of sent messages."""
        self.sent: list[tuple[str, str]] = []

    async def send_message(self, destination: str, text: str) -> None:
        """Log ``text`` as if it had been posted to ``destination``."""
        self.sent.append((destination, text))
        log_info(logger, "Message for destination %s:\n%s", destination, text)
