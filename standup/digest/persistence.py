r"""Persistence gateway for the entry store and schedule state.

The whole state is written as one JSON document after every change. The
file adapter writes to a temporary sibling and renames it over the
target, so a crash mid-write leaves the previous snapshot intact. Loads
treat a missing or undecodable file as "no snapshot"; callers then start
from defaults rather than from a partial state.

Usage
-----
>>> store = JsonFileSnapshotStore(Path("bot_data.json"))
>>> snapshot = await store.load()          # None when absent or malformed
>>> await store.save(PersistedSnapshot())

"""

from __future__ import annotations

import asyncio
import os
import typing as typ

import msgspec

from standup.digest.errors import MalformedSnapshotError, PersistenceError
from standup.digest.models import PersistedSnapshot
from standup.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder(PersistedSnapshot)


def encode_snapshot(snapshot: PersistedSnapshot) -> bytes:
    """Serialize ``snapshot`` to indented JSON bytes."""
    return msgspec.json.format(_encoder.encode(snapshot), indent=2)


def decode_snapshot(payload: bytes) -> PersistedSnapshot:
    """Decode ``payload`` into a snapshot.

    Raises
    ------
    MalformedSnapshotError
        If the payload is not valid JSON or does not match the snapshot
        shape, including out-of-range hour or minute values.

    """
    try:
        return _decoder.decode(payload)
    except msgspec.DecodeError as exc:
        raise MalformedSnapshotError(str(exc)) from exc


@typ.runtime_checkable
class SnapshotStore(typ.Protocol):
    """Protocol for loading and saving the persisted state snapshot."""

    async def load(self) -> PersistedSnapshot | None:
        """Return the stored snapshot, or ``None`` if absent or malformed."""
        ...

    async def save(self, snapshot: PersistedSnapshot) -> None:
        """Replace the stored snapshot with ``snapshot``.

        Raises
        ------
        PersistenceError
            If the snapshot could not be written.

        """
        ...


class JsonFileSnapshotStore:
    """Store the snapshot as a JSON file on the local filesystem.

    Parameters
    ----------
    path
        Target file. Parent directories are created on first save.

    """

    def __init__(self, path: Path) -> None:
        """Initialise the store for ``path``."""
        self._path = path
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Return the snapshot file path."""
        return self._path

    async def load(self) -> PersistedSnapshot | None:
        """Read and decode the snapshot file.

        Returns ``None`` when the file does not exist, cannot be read, or
        does not decode; the last two cases are logged.
        """
        try:
            payload = await asyncio.to_thread(self._path.read_bytes)
        except FileNotFoundError:
            log_info(
                logger,
                "No saved data found at %s. Starting with defaults.",
                self._path,
            )
            return None
        except OSError as exc:
            log_warning(
                logger,
                "Could not read %s (%s). Starting with defaults.",
                self._path,
                exc,
            )
            return None

        try:
            return decode_snapshot(payload)
        except MalformedSnapshotError as exc:
            log_warning(
                logger,
                "Ignoring malformed snapshot at %s: %s. Starting with defaults.",
                self._path,
                exc.detail,
            )
            return None

    async def save(self, snapshot: PersistedSnapshot) -> None:
        """Atomically replace the snapshot file.

        Concurrent saves are serialized so writes never interleave.

        Raises
        ------
        PersistenceError
            If the directory, temporary file or rename fails.

        """
        payload = encode_snapshot(snapshot)
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._write_atomic, payload)
            except OSError as exc:
                raise PersistenceError.write_failed(self._path, str(exc)) from exc

    def _write_atomic(self, payload: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f".{self._path.name}.tmp")
        with tmp_path.open("wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(self._path)


class InMemorySnapshotStore:
    """Keep the latest snapshot in memory.

    Useful for tests and for running without durability. ``saves``
    counts successful writes.
    """

    def __init__(self, snapshot: PersistedSnapshot | None = None) -> None:
        """Initialise with an optional pre-existing snapshot."""
        self.snapshot = snapshot
        self.saves = 0

    async def load(self) -> PersistedSnapshot | None:
        """Return the held snapshot."""
        return self.snapshot

    async def save(self, snapshot: PersistedSnapshot) -> None:
        """Hold ``snapshot`` as the latest state."""
        self.snapshot = snapshot
        self.saves += 1
