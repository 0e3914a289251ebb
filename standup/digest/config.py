"""Configuration for the digest scheduler, dispatcher and persistence.

Usage
-----
Create a configuration with defaults:

>>> config = DigestConfig()
>>> config.window_minutes
5

Or load from environment variables:

>>> import os
>>> os.environ["STANDUP_CHECK_INTERVAL_S"] = "30"
>>> DigestConfig.from_env().check_interval_s
30.0

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class DigestConfig:
    """Tunables for the daily digest cycle.

    Attributes
    ----------
    data_path
        Location of the JSON state snapshot.
    check_interval_s
        Seconds between scheduler wake-ups while idle.
    window_minutes
        Width of the eligible window after the target time, in minutes.
    cooldown_s
        Seconds the scheduler sleeps after a successful digest. Must exceed
        the eligible window so one window cannot produce two digests.
    send_max_attempts
        Total delivery attempts per digest, including the first.
    send_backoff_s
        Delay before each retry.
    preserve_late_submissions
        When true, a successful digest removes only the entries it
        delivered; reports submitted while the digest was being sent are
        kept for the next one. When false, the store is cleared outright.

    """

    data_path: Path = dc.field(default_factory=lambda: Path("bot_data.json"))
    check_interval_s: float = 60.0
    window_minutes: int = 5
    cooldown_s: float = 360.0
    send_max_attempts: int = 3
    send_backoff_s: float = 5.0
    preserve_late_submissions: bool = True

    def __post_init__(self) -> None:
        """Reject combinations that break the once-per-window guarantee."""
        if self.check_interval_s <= 0:
            msg = f"check_interval_s must be positive, got {self.check_interval_s}"
            raise ValueError(msg)
        if self.window_minutes < 1:
            msg = f"window_minutes must be positive, got {self.window_minutes}"
            raise ValueError(msg)
        if self.send_max_attempts < 1:
            msg = f"send_max_attempts must be >= 1, got {self.send_max_attempts}"
            raise ValueError(msg)
        if self.cooldown_s <= self.window_minutes * 60:
            msg = (
                f"cooldown_s ({self.cooldown_s}) must be longer than the "
                f"eligible window ({self.window_minutes} min)"
            )
            raise ValueError(msg)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_non_negative_float(env_var: str, default: float) -> float:
        """Read a non-negative float env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 0:
            msg = f"{env_var} must not be negative, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def _parse_positive_float(cls, env_var: str, default: float) -> float:
        """Read a strictly positive float env var, falling back to a default."""
        value = cls._parse_non_negative_float(env_var, default)
        if value == 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_bool(env_var: str, *, default: bool) -> bool:
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return default
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        msg = f"{env_var} must be a boolean (true/false), got: {raw!r}"
        raise ValueError(msg)

    @classmethod
    def from_env(cls) -> DigestConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``STANDUP_DATA_PATH``: snapshot file path.
        - ``STANDUP_CHECK_INTERVAL_S``: idle wake interval in seconds.
        - ``STANDUP_WINDOW_MINUTES``: eligible window width (positive integer).
        - ``STANDUP_COOLDOWN_S``: post-send cooldown in seconds.
        - ``STANDUP_SEND_MAX_ATTEMPTS``: delivery attempts (positive integer).
        - ``STANDUP_SEND_BACKOFF_S``: delay between attempts in seconds.
        - ``STANDUP_PRESERVE_LATE_SUBMISSIONS``: ``true`` or ``false``.

        Returns
        -------
        DigestConfig
            Configuration with values from the environment or defaults.

        Raises
        ------
        ValueError
            If any variable is present but invalid.

        """
        defaults = cls()
        raw_path = os.environ.get("STANDUP_DATA_PATH", "").strip()
        return cls(
            data_path=Path(raw_path) if raw_path else defaults.data_path,
            check_interval_s=cls._parse_positive_float(
                "STANDUP_CHECK_INTERVAL_S", defaults.check_interval_s
            ),
            window_minutes=cls._parse_positive_int(
                "STANDUP_WINDOW_MINUTES", defaults.window_minutes
            ),
            cooldown_s=cls._parse_non_negative_float(
                "STANDUP_COOLDOWN_S", defaults.cooldown_s
            ),
            send_max_attempts=cls._parse_positive_int(
                "STANDUP_SEND_MAX_ATTEMPTS", defaults.send_max_attempts
            ),
            send_backoff_s=cls._parse_non_negative_float(
                "STANDUP_SEND_BACKOFF_S", defaults.send_backoff_s
            ),
            preserve_late_submissions=cls._parse_bool(
                "STANDUP_PRESERVE_LATE_SUBMISSIONS",
                default=defaults.preserve_late_submissions,
            ),
        )
