"""Discord REST implementation of the MessageSender protocol.

Messages are posted to ``POST /channels/{channel_id}/messages``. Discord
caps message content at 2000 characters, so longer digests are split on
line boundaries and posted as consecutive messages.
"""

from __future__ import annotations

import json
import typing as typ

import httpx

from standup.logging import get_logger, log_debug
from standup.transport.errors import DiscordAPIError

if typ.TYPE_CHECKING:
    from standup.transport.config import DiscordSenderConfig

logger = get_logger(__name__)

MESSAGE_LIMIT = 2000
_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_RATE_LIMITED = 429
_ERROR_DETAIL_LIMIT = 200


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into chunks of at most ``limit`` characters.

    Chunks break between lines where possible. A single line longer than
    ``limit`` is cut into ``limit``-sized pieces.

    Parameters
    ----------
    text
        Full message body.
    limit
        Maximum characters per chunk.

    Returns
    -------
    list[str]
        Chunks in order; empty when ``text`` is empty.

    """
    if limit < 1:
        msg = f"limit must be positive, got {limit}"
        raise ValueError(msg)

    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current.strip():
        chunks.append(current)
    return chunks


def _retry_after(response: httpx.Response) -> float | None:
    """Return the rate-limit delay from the body or ``Retry-After`` header."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        body = None
    if isinstance(body, dict):
        value = typ.cast("dict[str, object]", body).get("retry_after")
        if isinstance(value, int | float):
            return float(value)

    header = response.headers.get("Retry-After")
    try:
        return float(header) if header is not None else None
    except ValueError:
        return None


class DiscordMessageSender:
    """Post messages to Discord channels through the REST API.

    Parameters
    ----------
    config
        Token, API base URL and timeout.
    http_client
        Optional ``httpx.AsyncClient`` (for tests). When omitted the
        sender creates and owns its client.

    Examples
    --------
    >>> import asyncio
    >>> sender = DiscordMessageSender(DiscordSenderConfig(token="..."))
    >>> # asyncio.run(sender.send_message("123456789", "hello"))
    >>> asyncio.run(sender.aclose())

    """

    def __init__(
        self,
        config: DiscordSenderConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the sender with configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bot {config.token}",
                "Content-Type": "application/json",
            },
        )

    @property
    def config(self) -> DiscordSenderConfig:
        """Return the sender configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close the HTTP client if this sender created it."""
        if self._owns_client:
            await self._client.aclose()

    async def send_message(self, destination: str, text: str) -> None:
        """Post ``text`` to channel ``destination``, split as needed.

        Raises
        ------
        DiscordAPIError
            If any chunk fails to post. Chunks already posted are not
            recalled.

        """
        url = f"{self._config.api_base}/channels/{destination}/messages"
        chunks = split_message(text)
        for index, chunk in enumerate(chunks, start=1):
            log_debug(
                logger,
                "Posting chunk %d/%d (%d chars) to channel %s",
                index,
                len(chunks),
                len(chunk),
                destination,
            )
            response = await self._post(url, {"content": chunk})
            self._check_response(response)

    async def _post(self, url: str, payload: dict[str, object]) -> httpx.Response:
        try:
            return await self._client.post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise DiscordAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise DiscordAPIError.network_error(str(exc)) from exc

    def _check_response(self, response: httpx.Response) -> None:
        if response.status_code == _HTTP_RATE_LIMITED:
            raise DiscordAPIError.rate_limited(_retry_after(response))
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise DiscordAPIError.http_error(
                response.status_code, response.text[:_ERROR_DETAIL_LIMIT]
            )
