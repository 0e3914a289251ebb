"""Standup service: the application state and every operation on it.

``StandupService`` is constructed once at startup, usually through
:meth:`StandupService.restore`, and handed to both the command layer and
the :class:`~standup.digest.controller.ScheduleController`. It owns the
entry store and schedule state and is the only place that decides when
the snapshot is written.

The digest cycle is shared by the scheduled and manual paths:

1. Copy the pending entries (the store lock is released straight away)
2. Stop with ``EMPTY`` when there is nothing to send
3. Compose the digest and hand it to the dispatcher
4. On success, remove the delivered entries, record the fire date and
   persist; on failure, leave the store untouched

Usage
-----
>>> service = await StandupService.restore(
...     StandupServiceDependencies(
...         snapshot_store=JsonFileSnapshotStore(Path("bot_data.json")),
...         dispatcher=Dispatcher(LoggingMessageSender()),
...     ),
... )
>>> await service.submit(
...     user_id="42", display_name="Ada", did="x", plan="y", blockers="none"
... )
>>> outcome = await service.trigger_now()

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import datetime as dt
import enum
import time
import typing as typ

from standup.common.time import localnow
from standup.digest.composer import compose_digest, order_entries
from standup.digest.config import DigestConfig
from standup.digest.errors import PersistenceError, StandupError
from standup.digest.models import PersistedSnapshot, ScheduleSettings
from standup.digest.schedule import ScheduleState
from standup.digest.store import EntryStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from standup.digest.dispatcher import Dispatcher
    from standup.digest.models import ReportEntry
    from standup.digest.observability import DigestEventLogger
    from standup.digest.persistence import SnapshotStore


class DigestTrigger(enum.StrEnum):
    """What started a digest cycle."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"


class DigestStatus(enum.StrEnum):
    """How a digest cycle ended without error."""

    SENT = "sent"
    EMPTY = "empty"


@dc.dataclass(frozen=True, slots=True)
class DigestOutcome:
    """Result of a digest cycle that did not raise.

    Attributes
    ----------
    status
        ``SENT`` when a digest was delivered, ``EMPTY`` when there was
        nothing to send.
    entry_count
        Entries included in the digest.
    attempts
        Delivery attempts used; 0 for an empty cycle.
    persisted
        Whether the post-send snapshot was written. Always ``True`` for
        an empty cycle, which changes nothing.

    """

    status: DigestStatus
    entry_count: int = 0
    attempts: int = 0
    persisted: bool = True


@dc.dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a state-changing command.

    Attributes
    ----------
    settings
        Schedule settings after the command.
    entry
        The stored entry, for submissions.
    persisted
        Whether the snapshot write succeeded. The in-memory change stands
        either way.

    """

    settings: ScheduleSettings
    entry: ReportEntry | None = None
    persisted: bool = True


@dc.dataclass(frozen=True, slots=True)
class StandupServiceDependencies:
    """Collaborators for :class:`StandupService`.

    Attributes
    ----------
    snapshot_store
        Persistence gateway for the combined state.
    dispatcher
        Delivery with retry.
    event_logger
        Optional structured event logger.

    """

    snapshot_store: SnapshotStore
    dispatcher: Dispatcher
    event_logger: DigestEventLogger | None = None


class StandupService:
    """Owns the entry store and schedule state and runs digest cycles."""

    def __init__(
        self,
        dependencies: StandupServiceDependencies,
        *,
        store: EntryStore | None = None,
        schedule: ScheduleState | None = None,
        config: DigestConfig | None = None,
        clock: cabc.Callable[[], dt.datetime] = localnow,
    ) -> None:
        """Configure the service.

        Parameters
        ----------
        dependencies
            Persistence gateway, dispatcher and event logger.
        store
            Entry store; a fresh empty store when omitted.
        schedule
            Schedule state; defaults (17:00, no destination) when omitted.
        config
            Digest tunables; defaults when omitted.
        clock
            Local clock used for submission stamps and fire dates.

        """
        self._snapshot_store = dependencies.snapshot_store
        self._dispatcher = dependencies.dispatcher
        self._event_logger = dependencies.event_logger
        self._config = config or DigestConfig()
        self._clock = clock
        self._store = store if store is not None else EntryStore(clock=clock)
        self._schedule = schedule if schedule is not None else ScheduleState()
        self._persist_lock = asyncio.Lock()
        self._cycle_lock = asyncio.Lock()

    @classmethod
    async def restore(
        cls,
        dependencies: StandupServiceDependencies,
        *,
        config: DigestConfig | None = None,
        clock: cabc.Callable[[], dt.datetime] = localnow,
    ) -> StandupService:
        """Build a service from the persisted snapshot, or from defaults.

        A missing or malformed snapshot yields an empty store and the
        default schedule.
        """
        service = cls(dependencies, config=config, clock=clock)
        await service.load()
        return service

    async def load(self) -> bool:
        """Replace the in-memory state with the persisted snapshot.

        Call before the service is shared; entries submitted earlier are
        discarded.

        Returns
        -------
        bool
            ``True`` when a snapshot was restored, ``False`` when the
            defaults were kept.

        """
        snapshot = await self._snapshot_store.load()
        if snapshot is None:
            return False
        hour, minute = snapshot.time_of_day
        self._store = EntryStore(snapshot.standup_entries, clock=self._clock)
        self._schedule = ScheduleState(
            ScheduleSettings(
                hour=hour,
                minute=minute,
                destination=snapshot.destination,
                last_fired=snapshot.last_summary_date,
            )
        )
        return True

    @property
    def config(self) -> DigestConfig:
        """Return the digest configuration."""
        return self._config

    async def settings(self) -> ScheduleSettings:
        """Return the current schedule settings."""
        return await self._schedule.get()

    async def pending_entries(self) -> list[ReportEntry]:
        """Return pending entries in digest order."""
        return order_entries(await self._store.snapshot())

    async def submit(
        self,
        *,
        user_id: str,
        display_name: str,
        did: str,
        plan: str,
        blockers: str,
    ) -> CommandResult:
        """Record a standup report, replacing the user's previous one."""
        entry = await self._store.submit(
            user_id=user_id,
            display_name=display_name,
            did=did,
            plan=plan,
            blockers=blockers,
        )
        persisted = await self.persist("submit")
        return CommandResult(
            settings=await self._schedule.get(), entry=entry, persisted=persisted
        )

    async def set_destination(self, destination: str) -> CommandResult:
        """Set the channel that receives the digest."""
        settings = await self._schedule.set_destination(destination)
        persisted = await self.persist("set_destination")
        return CommandResult(settings=settings, persisted=persisted)

    async def set_time(self, hour: int, minute: int) -> CommandResult:
        """Set the daily digest time.

        Raises
        ------
        InvalidTimeError
            If the time is out of range; nothing is changed or persisted.

        """
        settings = await self._schedule.set_time(hour, minute)
        persisted = await self.persist("set_time")
        return CommandResult(settings=settings, persisted=persisted)

    async def trigger_now(self) -> DigestOutcome:
        """Run one digest cycle immediately, ignoring the schedule window.

        Raises
        ------
        NoDestinationConfiguredError
            If no destination is set and there are entries to send.
        SendError
            If delivery failed on every attempt.

        """
        return await self.run_digest_cycle(DigestTrigger.MANUAL)

    async def run_digest_cycle(self, trigger: DigestTrigger) -> DigestOutcome:
        """Compose, deliver and clear the pending entries.

        Cycles are serialized, so a manual trigger that overlaps a
        scheduled one sees the store the first cycle left behind.

        Raises
        ------
        NoDestinationConfiguredError
            If there are entries but no destination.
        SendError
            If every delivery attempt failed. The store is left intact.

        """
        async with self._cycle_lock:
            entries, empty = await self._store.snapshot_and_is_empty()
            if empty:
                self._log("log_cycle_empty", trigger=str(trigger))
                return DigestOutcome(status=DigestStatus.EMPTY)

            text = compose_digest(entries)
            if text is None:  # pragma: no cover - non-empty snapshot
                return DigestOutcome(status=DigestStatus.EMPTY)

            self._log(
                "log_cycle_started", trigger=str(trigger), entry_count=len(entries)
            )
            started_at = time.monotonic()
            settings = await self._schedule.get()
            try:
                attempts = await self._dispatcher.send(settings.destination, text)
            except StandupError as exc:
                self._log("log_cycle_failed", trigger=str(trigger), error=exc)
                raise

            await self._remove_delivered(entries)
            await self._schedule.mark_fired(self._clock().date())
            persisted = await self.persist("digest")
            self._log(
                "log_cycle_sent",
                trigger=str(trigger),
                destination=settings.destination,
                entry_count=len(entries),
                duration=_elapsed(started_at),
            )
            return DigestOutcome(
                status=DigestStatus.SENT,
                entry_count=len(entries),
                attempts=attempts,
                persisted=persisted,
            )

    async def _remove_delivered(self, entries: list[ReportEntry]) -> None:
        if self._config.preserve_late_submissions:
            await self._store.discard_delivered(entries)
        else:
            await self._store.clear()

    async def snapshot(self) -> PersistedSnapshot:
        """Return the combined state in its persisted form."""
        entries = await self._store.snapshot()
        settings = await self._schedule.get()
        return PersistedSnapshot(
            standup_entries=entries,
            summary_channel_id=settings.destination,
            summary_time=(settings.hour, settings.minute),
            last_summary_date=settings.last_fired,
        )

    async def persist(self, operation: str) -> bool:
        """Write the current state; return whether the write succeeded.

        Writes are serialized and each one captures the state at the
        moment it runs, so the last write always reflects the latest
        in-memory state. Failures are logged and never raised.
        """
        async with self._persist_lock:
            snapshot = await self.snapshot()
            try:
                await self._snapshot_store.save(snapshot)
            except PersistenceError as exc:
                self._log("log_persist_failed", operation=operation, error=exc)
                return False
        return True

    def _log(self, event_method_name: str, **kwargs: typ.Any) -> None:  # noqa: ANN401
        """Delegate to the event logger when one is configured."""
        if self._event_logger is None:
            return
        getattr(self._event_logger, event_method_name)(**kwargs)


def _elapsed(started_at: float) -> dt.timedelta:
    return dt.timedelta(seconds=time.monotonic() - started_at)
