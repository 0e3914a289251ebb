"""Test doubles shared by the standup unit and feature tests."""

from __future__ import annotations

import datetime as dt

from standup.digest.models import ReportEntry
from standup.transport.errors import DiscordAPIError

LOCAL_TZ = dt.timezone(dt.timedelta(hours=1))


def at(hour: int, minute: int, *, day: int = 14) -> dt.datetime:
    """Return an aware local datetime on 2025-07-``day`` at ``hour:minute``."""
    return dt.datetime(2025, 7, day, hour, minute, tzinfo=LOCAL_TZ)


def make_entry(
    user_id: str,
    display_name: str | None = None,
    *,
    did: str = "Reviewed pull requests",
    plan: str = "Ship the release",
    blockers: str = "None",
    timestamp: dt.datetime | None = None,
) -> ReportEntry:
    """Build a report entry with sensible defaults."""
    return ReportEntry(
        user_id=user_id,
        display_name=display_name or f"user-{user_id}",
        did=did,
        plan=plan,
        blockers=blockers,
        timestamp=timestamp or at(9, 0),
    )


class FakeClock:
    """Callable clock whose current time tests move by hand."""

    def __init__(self, now: dt.datetime | None = None) -> None:
        self.now = now or at(9, 0)

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **delta: float) -> dt.datetime:
        """Move the clock forward by ``datetime.timedelta(**delta)``."""
        self.now += dt.timedelta(**delta)
        return self.now


class RecordingSleep:
    """Awaitable sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedSender:
    """MessageSender that fails a fixed number of times before succeeding.

    Parameters
    ----------
    failures
        Number of leading attempts that raise ``DiscordAPIError``.
        A negative value fails every attempt.

    """

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.attempts: list[tuple[str, str]] = []
        self.sent: list[tuple[str, str]] = []

    async def send_message(self, destination: str, text: str) -> None:
        self.attempts.append((destination, text))
        if self.failures < 0 or len(self.attempts) <= self.failures:
            raise DiscordAPIError.http_error(503, "service unavailable")
        self.sent.append((destination, text))
