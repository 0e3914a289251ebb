"""Unit tests for the standup CLI."""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

import pytest

from standup import cli
from standup.digest.models import PersistedSnapshot
from standup.digest.persistence import JsonFileSnapshotStore
from tests.helpers.standup_doubles import make_entry

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_snapshot(path: Path, snapshot: PersistedSnapshot) -> None:
    asyncio.run(JsonFileSnapshotStore(path).save(snapshot))


def _read_snapshot(path: Path) -> PersistedSnapshot | None:
    return asyncio.run(JsonFileSnapshotStore(path).load())


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STANDUP_DATA_PATH", raising=False)
    monkeypatch.setenv("STANDUP_SENDER_BACKEND", "log")


class TestCliStructure:
    """Tests for CLI structure and subcommands."""

    def test_app_has_name(self) -> None:
        """App should be called standup."""
        assert cli.app.name == ("standup",)

    @pytest.mark.parametrize("command", ["serve", "show", "send-now"])
    def test_app_has_command(self, command: str) -> None:
        """Each subcommand is registered."""
        # Cyclopts command names are tuples
        command_names = [cmd.name for cmd in cli.app._commands.values()]  # noqa: SLF001
        assert (command,) in command_names


class TestShow:
    """Tests for ``standup show``."""

    def test_show_without_data_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A missing file shows the defaults."""
        exit_code = cli.show(data_path=tmp_path / "missing.json")

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "17:00" in out
        assert "(not set)" in out
        assert "0 entries" in out

    def test_show_prints_pending_digest(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Saved entries are rendered as the digest that would be sent."""
        path = tmp_path / "bot_data.json"
        _write_snapshot(
            path,
            PersistedSnapshot(
                standup_entries=[make_entry("u1", "Ada", did="Shipped v2")],
                summary_channel_id="chan",
                summary_time=(9, 30),
                last_summary_date=dt.date(2025, 7, 13),
            ),
        )

        cli.show(data_path=path)

        out = capsys.readouterr().out
        assert "09:30" in out
        assert "chan" in out
        assert "2025-07-13" in out
        assert "## Ada" in out
        assert "**Did:** Shipped v2" in out


class TestSendNow:
    """Tests for ``standup send-now``."""

    def test_sends_and_clears_saved_entries(self, tmp_path: Path) -> None:
        """A successful send empties the saved entries."""
        path = tmp_path / "bot_data.json"
        _write_snapshot(
            path,
            PersistedSnapshot(
                standup_entries=[make_entry("u1", "Ada")],
                summary_channel_id="chan",
            ),
        )

        exit_code = cli.send_now(data_path=path)

        snapshot = _read_snapshot(path)
        assert exit_code == 0
        assert snapshot is not None
        assert snapshot.standup_entries == [], "entries should be cleared"
        assert snapshot.last_summary_date is not None

    def test_missing_destination_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Entries without a channel exit non-zero and are kept."""
        path = tmp_path / "bot_data.json"
        _write_snapshot(
            path, PersistedSnapshot(standup_entries=[make_entry("u1", "Ada")])
        )

        exit_code = cli.send_now(data_path=path)

        assert exit_code == 1
        assert "No summary channel set." in capsys.readouterr().err
        snapshot = _read_snapshot(path)
        assert snapshot is not None
        assert len(snapshot.standup_entries) == 1

    def test_nothing_to_send(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An empty store exits cleanly."""
        exit_code = cli.send_now(data_path=tmp_path / "bot_data.json")

        assert exit_code == 0
        assert "empty" in capsys.readouterr().out
