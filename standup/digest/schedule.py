"""Schedule state: when the daily digest fires and where it goes.

``ScheduleState`` owns the mutable configuration behind an
``asyncio.Lock``; readers receive frozen :class:`ScheduleSettings` copies.
``is_within_window`` is the pure eligibility test the controller applies
on every wake.
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as typ

from standup.digest.errors import InvalidTimeError
from standup.digest.models import ScheduleSettings

if typ.TYPE_CHECKING:
    import datetime as dt

MAX_HOUR = 23
MAX_MINUTE = 59


def validate_time(hour: int, minute: int) -> None:
    """Raise :class:`InvalidTimeError` unless ``hour:minute`` is a valid time."""
    if not (0 <= hour <= MAX_HOUR and 0 <= minute <= MAX_MINUTE):
        raise InvalidTimeError(hour, minute)


def is_within_window(
    now: dt.datetime,
    hour: int,
    minute: int,
    *,
    window_minutes: int,
) -> bool:
    """Return whether ``now`` falls in the eligible window for ``hour:minute``.

    The window opens at the target minute and stays open for
    ``window_minutes`` minutes within the target hour. It does not spill
    into the following hour, so a target of 17:58 with a five minute
    window is eligible at 17:58 and 17:59 only.

    Parameters
    ----------
    now
        Current local time.
    hour
        Target hour.
    minute
        Target minute.
    window_minutes
        Width of the eligible window in minutes.

    """
    return now.hour == hour and minute <= now.minute < minute + window_minutes


class ScheduleState:
    """Holds the digest time, destination and last-fired date.

    Parameters
    ----------
    settings
        Initial settings; defaults to 17:00 with no destination.

    """

    def __init__(self, settings: ScheduleSettings | None = None) -> None:
        """Initialise with ``settings`` or the defaults."""
        initial = settings or ScheduleSettings()
        validate_time(initial.hour, initial.minute)
        self._settings = initial
        self._lock = asyncio.Lock()

    async def get(self) -> ScheduleSettings:
        """Return the current settings."""
        async with self._lock:
            return self._settings

    async def set_destination(self, destination: str) -> ScheduleSettings:
        """Replace the destination channel identity."""
        async with self._lock:
            self._settings = dc.replace(self._settings, destination=destination)
            return self._settings

    async def set_time(self, hour: int, minute: int) -> ScheduleSettings:
        """Replace the digest time.

        Raises
        ------
        InvalidTimeError
            If ``hour`` is not in 0..23 or ``minute`` is not in 0..59. The
            stored settings are left unchanged.

        """
        validate_time(hour, minute)
        async with self._lock:
            self._settings = dc.replace(self._settings, hour=hour, minute=minute)
            return self._settings

    async def mark_fired(self, day: dt.date) -> ScheduleSettings:
        """Record ``day`` as the date of the latest successful digest."""
        async with self._lock:
            self._settings = dc.replace(self._settings, last_fired=day)
            return self._settings
