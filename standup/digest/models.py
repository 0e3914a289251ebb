"""Data structures shared by the digest engine.

``ReportEntry`` and ``PersistedSnapshot`` are ``msgspec`` structs so the
same definitions drive both in-memory use and the JSON snapshot format.
Field names on ``PersistedSnapshot`` match the ``bot_data.json`` layout
used by earlier deployments, so existing data files load unchanged.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_HOUR = 17
DEFAULT_MINUTE = 0

Hour = typ.Annotated[int, msgspec.Meta(ge=0, le=23)]
Minute = typ.Annotated[int, msgspec.Meta(ge=0, le=59)]
AwareDatetime = typ.Annotated[dt.datetime, msgspec.Meta(tz=True)]


class ReportEntry(msgspec.Struct, kw_only=True, frozen=True):
    """One member's standup submission.

    Entries are immutable; a newer submission from the same user replaces
    the stored entry rather than modifying it.

    Attributes
    ----------
    user_id
        Opaque platform identity of the submitting member.
    display_name
        Name shown as the section title in the digest.
    did
        What the member worked on.
    plan
        What the member plans to do next.
    blockers
        Anything blocking progress.
    timestamp
        Local-time creation instant (timezone aware).

    """

    user_id: str
    display_name: str
    did: str
    plan: str
    blockers: str
    timestamp: AwareDatetime


def latest_per_user(entries: cabc.Iterable[ReportEntry]) -> dict[str, ReportEntry]:
    """Collapse ``entries`` to the newest entry for each user identity."""
    latest: dict[str, ReportEntry] = {}
    for entry in entries:
        current = latest.get(entry.user_id)
        if current is None or entry.timestamp >= current.timestamp:
            latest[entry.user_id] = entry
    return latest


class PersistedSnapshot(msgspec.Struct, kw_only=True):
    """Serialized form of the entry store and schedule state."""

    standup_entries: list[ReportEntry] = msgspec.field(default_factory=list)
    summary_channel_id: str | int | None = None
    summary_time: tuple[Hour, Minute] | None = None
    last_summary_date: dt.date | None = None

    @property
    def destination(self) -> str | None:
        """Return the destination channel as a string, if set."""
        if self.summary_channel_id is None:
            return None
        return str(self.summary_channel_id)

    @property
    def time_of_day(self) -> tuple[int, int]:
        """Return the configured ``(hour, minute)``, defaulting to 17:00."""
        if self.summary_time is None:
            return (DEFAULT_HOUR, DEFAULT_MINUTE)
        return (self.summary_time[0], self.summary_time[1])


@dc.dataclass(frozen=True, slots=True)
class ScheduleSettings:
    """Point-in-time copy of the schedule state.

    Attributes
    ----------
    hour
        Target hour, 0 to 23.
    minute
        Target minute, 0 to 59.
    destination
        Destination channel identity, or ``None`` when unset.
    last_fired
        Local date of the most recent successful digest, if any.

    """

    hour: int = DEFAULT_HOUR
    minute: int = DEFAULT_MINUTE
    destination: str | None = None
    last_fired: dt.date | None = None

    @property
    def time_label(self) -> str:
        """Return the target time formatted as ``HH:MM``."""
        return f"{self.hour:02d}:{self.minute:02d}"
