"""Daily standup digest engine.

This package holds the state, composition, delivery and scheduling logic
for the daily digest. It has no knowledge of HTTP; the command layer in
:mod:`standup.api` and the CLI both drive it through
:class:`~standup.digest.service.StandupService`.

Public API
----------
StandupService
    Owns the entry store and schedule state; runs digest cycles.
ScheduleController
    Background loop that fires the digest once per eligible window.
Dispatcher
    Delivery with bounded retry.
compose_digest
    Render entries as the digest body.

"""

from standup.digest.composer import compose_digest
from standup.digest.config import DigestConfig
from standup.digest.controller import ControllerState, ScheduleController
from standup.digest.dispatcher import Dispatcher
from standup.digest.errors import (
    InvalidTimeError,
    MalformedSnapshotError,
    NoDestinationConfiguredError,
    PersistenceError,
    SendError,
    StandupError,
)
from standup.digest.models import PersistedSnapshot, ReportEntry, ScheduleSettings
from standup.digest.observability import DigestEventLogger, DigestEventType
from standup.digest.persistence import (
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    SnapshotStore,
)
from standup.digest.schedule import ScheduleState, is_within_window
from standup.digest.service import (
    CommandResult,
    DigestOutcome,
    DigestStatus,
    DigestTrigger,
    StandupService,
    StandupServiceDependencies,
)
from standup.digest.store import EntryStore

__all__ = [
    "CommandResult",
    "ControllerState",
    "DigestConfig",
    "DigestEventLogger",
    "DigestEventType",
    "DigestOutcome",
    "DigestStatus",
    "DigestTrigger",
    "Dispatcher",
    "EntryStore",
    "InMemorySnapshotStore",
    "InvalidTimeError",
    "JsonFileSnapshotStore",
    "MalformedSnapshotError",
    "NoDestinationConfiguredError",
    "PersistedSnapshot",
    "PersistenceError",
    "ReportEntry",
    "ScheduleController",
    "ScheduleSettings",
    "ScheduleState",
    "SendError",
    "SnapshotStore",
    "StandupError",
    "StandupService",
    "StandupServiceDependencies",
    "compose_digest",
    "is_within_window",
]
