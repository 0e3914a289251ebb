"""Unit tests for snapshot persistence."""

from __future__ import annotations

import datetime as dt
import json
import typing as typ
from unittest import mock

import pytest

from standup.digest.dispatcher import Dispatcher
from standup.digest.errors import MalformedSnapshotError, PersistenceError
from standup.digest.models import PersistedSnapshot
from standup.digest.persistence import (
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    SnapshotStore,
    decode_snapshot,
    encode_snapshot,
)
from standup.digest.service import StandupService, StandupServiceDependencies
from tests.helpers.standup_doubles import ScriptedSender, at, make_entry

if typ.TYPE_CHECKING:
    from pathlib import Path


def _snapshot() -> PersistedSnapshot:
    return PersistedSnapshot(
        standup_entries=[make_entry("u1", "Ada"), make_entry("u2", "Bob")],
        summary_channel_id="998877",
        summary_time=(9, 30),
        last_summary_date=dt.date(2025, 7, 13),
    )


def _entry_document(timestamp: str) -> dict[str, str]:
    return {
        "user_id": "1",
        "display_name": "Ada",
        "did": "a",
        "plan": "b",
        "blockers": "c",
        "timestamp": timestamp,
    }


def _mixed_timezone_payload() -> bytes:
    return json.dumps(
        {
            "standup_entries": [
                _entry_document("2025-07-14T09:00:00+01:00"),
                _entry_document("2025-07-14T10:00:00"),
            ],
            "summary_channel_id": "chan",
        }
    ).encode()


class TestCodec:
    """Tests for encode_snapshot and decode_snapshot."""

    def test_uses_legacy_field_names(self) -> None:
        """The JSON document keeps the historic bot_data.json keys."""
        document = json.loads(encode_snapshot(_snapshot()))

        assert set(document) == {
            "standup_entries",
            "summary_channel_id",
            "summary_time",
            "last_summary_date",
        }
        assert document["summary_time"] == [9, 30], "time is an [h, m] pair"
        assert document["last_summary_date"] == "2025-07-13"

    def test_decodes_integer_channel_id(self) -> None:
        """Numeric channel IDs written by earlier versions still load."""
        payload = json.dumps(
            {"standup_entries": [], "summary_channel_id": 123, "summary_time": None}
        ).encode()

        snapshot = decode_snapshot(payload)

        assert snapshot.destination == "123", "destination should be a string"
        assert snapshot.time_of_day == (17, 0), "missing time defaults to 17:00"

    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b'{"summary_time": [24, 0]}',
            b'{"summary_time": [12, 60]}',
            b'{"standup_entries": [{"user_id": "u1"}]}',
        ],
    )
    def test_rejects_malformed_payloads(self, payload: bytes) -> None:
        """Invalid JSON or out-of-range values raise MalformedSnapshotError."""
        with pytest.raises(MalformedSnapshotError):
            decode_snapshot(payload)

    def test_rejects_naive_entry_timestamp(self) -> None:
        """Entry timestamps without an offset are malformed."""
        with pytest.raises(MalformedSnapshotError):
            decode_snapshot(_mixed_timezone_payload())

    def test_accepts_sub_microsecond_timestamps(self) -> None:
        """Nanosecond precision written by earlier versions still loads."""
        entry = _entry_document("2025-07-14T09:00:00.123456789+01:00")
        payload = json.dumps({"standup_entries": [entry]}).encode()

        snapshot = decode_snapshot(payload)

        assert snapshot.standup_entries[0].timestamp.utcoffset() == dt.timedelta(
            hours=1
        )


class TestJsonFileSnapshotStore:
    """Tests for the JSON file adapter."""

    @pytest.mark.asyncio
    async def test_save_then_load_restores_state(self, tmp_path: Path) -> None:
        """A saved snapshot loads back with the same content."""
        store = JsonFileSnapshotStore(tmp_path / "bot_data.json")
        original = _snapshot()

        await store.save(original)
        loaded = await store.load()

        assert loaded is not None, "expected a snapshot"
        assert loaded.standup_entries == original.standup_entries
        assert loaded.destination == "998877"
        assert loaded.time_of_day == (9, 30)
        assert loaded.last_summary_date == dt.date(2025, 7, 13)

    @pytest.mark.asyncio
    async def test_entry_timestamps_survive(self, tmp_path: Path) -> None:
        """Aware timestamps keep their offset through a save and load."""
        store = JsonFileSnapshotStore(tmp_path / "bot_data.json")
        entry = make_entry("u1", timestamp=at(8, 15))

        await store.save(PersistedSnapshot(standup_entries=[entry]))
        loaded = await store.load()

        assert loaded is not None
        assert loaded.standup_entries[0].timestamp == at(8, 15)

    @pytest.mark.asyncio
    async def test_missing_file_loads_as_none(self, tmp_path: Path) -> None:
        """An absent file means no snapshot."""
        store = JsonFileSnapshotStore(tmp_path / "missing.json")

        assert await store.load() is None

    @pytest.mark.asyncio
    async def test_malformed_file_loads_as_none(self, tmp_path: Path) -> None:
        """A corrupt file is ignored rather than raising."""
        path = tmp_path / "bot_data.json"
        path.write_text("{ truncated", encoding="utf-8")

        assert await JsonFileSnapshotStore(path).load() is None

    @pytest.mark.asyncio
    async def test_mixed_timezone_entries_restore_defaults(
        self, tmp_path: Path
    ) -> None:
        """A file mixing naive and aware timestamps does not break startup."""
        path = tmp_path / "bot_data.json"
        path.write_bytes(_mixed_timezone_payload())
        service = StandupService(
            StandupServiceDependencies(
                snapshot_store=JsonFileSnapshotStore(path),
                dispatcher=Dispatcher(ScriptedSender()),
            )
        )

        restored = await service.load()

        assert restored is False, "malformed snapshot should be ignored"
        assert await service.pending_entries() == []
        assert (await service.settings()).destination is None

    @pytest.mark.asyncio
    async def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        """Saving into a new directory creates it."""
        path = tmp_path / "nested" / "dir" / "bot_data.json"

        await JsonFileSnapshotStore(path).save(PersistedSnapshot())

        assert path.exists(), "snapshot file should be written"

    @pytest.mark.asyncio
    async def test_save_leaves_no_temporary_file(self, tmp_path: Path) -> None:
        """The temporary sibling is renamed over the target."""
        path = tmp_path / "bot_data.json"

        await JsonFileSnapshotStore(path).save(_snapshot())

        assert sorted(p.name for p in tmp_path.iterdir()) == ["bot_data.json"]

    @pytest.mark.asyncio
    async def test_write_failure_raises_persistence_error(
        self, tmp_path: Path
    ) -> None:
        """OS errors during the write surface as PersistenceError."""
        store = JsonFileSnapshotStore(tmp_path / "bot_data.json")

        with (
            mock.patch.object(
                JsonFileSnapshotStore,
                "_write_atomic",
                side_effect=PermissionError("read-only"),
            ),
            pytest.raises(PersistenceError, match="read-only"),
        ):
            await store.save(_snapshot())

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_snapshot(self, tmp_path: Path) -> None:
        """A failed save does not disturb the file already on disk."""
        path = tmp_path / "bot_data.json"
        store = JsonFileSnapshotStore(path)
        await store.save(_snapshot())
        before = path.read_bytes()

        with (
            mock.patch("os.fsync", side_effect=OSError("disk full")),
            pytest.raises(PersistenceError),
        ):
            await store.save(PersistedSnapshot())

        assert path.read_bytes() == before, "previous snapshot should remain"

    def test_satisfies_protocol(self, tmp_path: Path) -> None:
        """The file adapter implements SnapshotStore."""
        assert isinstance(JsonFileSnapshotStore(tmp_path / "x.json"), SnapshotStore)


class TestInMemorySnapshotStore:
    """Tests for the in-memory adapter."""

    @pytest.mark.asyncio
    async def test_holds_latest_snapshot(self) -> None:
        """Saves replace the held snapshot and are counted."""
        store = InMemorySnapshotStore()
        snapshot = _snapshot()

        await store.save(PersistedSnapshot())
        await store.save(snapshot)

        assert await store.load() is snapshot, "expected latest snapshot"
        assert store.saves == 2, "expected two saves"

    def test_satisfies_protocol(self) -> None:
        """The in-memory adapter implements SnapshotStore."""
        assert isinstance(InMemorySnapshotStore(), SnapshotStore)
