"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from standup.digest.config import DigestConfig
from standup.digest.dispatcher import Dispatcher
from standup.digest.persistence import InMemorySnapshotStore
from standup.digest.service import StandupService, StandupServiceDependencies
from tests.helpers.standup_doubles import FakeClock, RecordingSleep, ScriptedSender


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock fixed at 09:00 local time."""
    return FakeClock()


@pytest.fixture
def sleeper() -> RecordingSleep:
    """Return a sleep double that records requested delays."""
    return RecordingSleep()


@pytest.fixture
def sender() -> ScriptedSender:
    """Return a sender that succeeds on the first attempt."""
    return ScriptedSender()


@pytest.fixture
def snapshot_store() -> InMemorySnapshotStore:
    """Return an empty in-memory snapshot store."""
    return InMemorySnapshotStore()


@pytest.fixture
def digest_config() -> DigestConfig:
    """Return the default digest configuration."""
    return DigestConfig()


@pytest.fixture
def service(
    sender: ScriptedSender,
    sleeper: RecordingSleep,
    snapshot_store: InMemorySnapshotStore,
    digest_config: DigestConfig,
    clock: FakeClock,
) -> StandupService:
    """Build a service wired to test doubles."""
    dispatcher = Dispatcher(
        sender,
        max_attempts=digest_config.send_max_attempts,
        backoff_s=digest_config.send_backoff_s,
        sleep=sleeper,
    )
    return StandupService(
        StandupServiceDependencies(
            snapshot_store=snapshot_store,
            dispatcher=dispatcher,
        ),
        config=digest_config,
        clock=clock,
    )
