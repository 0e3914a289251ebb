"""Configuration for the Discord message sender."""

from __future__ import annotations

import dataclasses
import os

from standup.transport.errors import SenderConfigError

_DEFAULT_API_BASE = "https://discord.com/api/v10"
_DEFAULT_TIMEOUT_S = 10.0


@dataclasses.dataclass(frozen=True, slots=True)
class DiscordSenderConfig:
    """Configuration for :class:`~standup.transport.discord.DiscordMessageSender`.

    Attributes
    ----------
    token
        Bot token sent as ``Authorization: Bot <token>``.
    api_base
        Base URL of the Discord REST API, without a trailing slash.
    timeout_s
        Per-request timeout in seconds.

    """

    token: str
    api_base: str = _DEFAULT_API_BASE
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw = os.environ.get("STANDUP_DISCORD_TIMEOUT_S")
        if raw is None or not raw.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise SenderConfigError.invalid_timeout(raw) from exc
        if timeout <= 0:
            raise SenderConfigError.invalid_timeout(raw)
        return timeout

    @classmethod
    def from_env(cls) -> DiscordSenderConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``STANDUP_DISCORD_TOKEN``: bot token; ``DISCORD_TOKEN`` is used
          when it is unset
        - ``STANDUP_DISCORD_API_BASE``: optional API base URL override
        - ``STANDUP_DISCORD_TIMEOUT_S``: optional positive request timeout

        Raises
        ------
        SenderConfigError
            If no token is available or the timeout is invalid.

        """
        raw_token = os.environ.get("STANDUP_DISCORD_TOKEN") or os.environ.get(
            "DISCORD_TOKEN", ""
        )
        token = raw_token.strip()
        if not token:
            raise SenderConfigError.missing_token()

        api_base = os.environ.get("STANDUP_DISCORD_API_BASE", _DEFAULT_API_BASE)
        return cls(
            token=token,
            api_base=api_base.strip().rstrip("/") or _DEFAULT_API_BASE,
            timeout_s=cls._parse_timeout_from_env(),
        )
