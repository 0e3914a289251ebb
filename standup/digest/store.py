"""In-memory store of pending standup entries.

The store keeps at most one entry per user. Every public operation runs
inside a single ``asyncio.Lock`` critical section, and callers only ever
receive copies, so command handlers and the scheduler can share one
instance without further coordination.

Usage
-----
>>> store = EntryStore()
>>> await store.submit(
...     user_id="42",
...     display_name="Ada",
...     did="Wrote the parser",
...     plan="Write the tests",
...     blockers="None",
... )
>>> entries, empty = await store.snapshot_and_is_empty()

"""

from __future__ import annotations

import asyncio
import typing as typ

from standup.common.time import localnow
from standup.digest.models import ReportEntry, latest_per_user

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt


class EntryStore:
    """Concurrent map from user identity to their latest pending entry.

    Parameters
    ----------
    entries
        Optional entries to restore, typically from a persisted snapshot.
        Duplicates for one user are collapsed to the newest.
    clock
        Callable returning the current local time; used to stamp new
        submissions.

    """

    def __init__(
        self,
        entries: cabc.Iterable[ReportEntry] = (),
        *,
        clock: cabc.Callable[[], dt.datetime] = localnow,
    ) -> None:
        """Initialise the store, optionally restoring ``entries``."""
        self._entries = latest_per_user(entries)
        self._clock = clock
        self._lock = asyncio.Lock()

    async def submit(
        self,
        *,
        user_id: str,
        display_name: str,
        did: str,
        plan: str,
        blockers: str,
    ) -> ReportEntry:
        """Replace any pending entry for ``user_id`` with a new one.

        Returns
        -------
        ReportEntry
            The stored entry, stamped with the current local time.

        """
        entry = ReportEntry(
            user_id=user_id,
            display_name=display_name,
            did=did,
            plan=plan,
            blockers=blockers,
            timestamp=self._clock(),
        )
        async with self._lock:
            self._entries.pop(user_id, None)
            self._entries[user_id] = entry
        return entry

    async def snapshot(self) -> list[ReportEntry]:
        """Return a copy of all pending entries in submission order."""
        async with self._lock:
            return list(self._entries.values())

    async def snapshot_and_is_empty(self) -> tuple[list[ReportEntry], bool]:
        """Return a copy of all entries and whether the store was empty.

        Both values are read inside the same critical section, so the flag
        always describes the returned list.
        """
        async with self._lock:
            entries = list(self._entries.values())
        return entries, not entries

    async def clear(self) -> None:
        """Remove every pending entry."""
        async with self._lock:
            self._entries.clear()

    async def discard_delivered(self, delivered: cabc.Iterable[ReportEntry]) -> int:
        """Remove entries that are still exactly the ones ``delivered``.

        An entry replaced by a newer submission after the digest snapshot
        was taken is kept for the next digest.

        Returns
        -------
        int
            Number of entries removed.

        """
        removed = 0
        async with self._lock:
            for entry in delivered:
                if self._entries.get(entry.user_id) == entry:
                    del self._entries[entry.user_id]
                    removed += 1
        return removed

    def __len__(self) -> int:
        """Return the number of pending entries."""
        return len(self._entries)
