"""Command-line interface for the standup digest service.

Usage:
    standup serve              # Start the HTTP server and scheduler
    standup show               # Print the saved state and pending digest
    standup send-now           # Send the digest immediately

Environment variables:
    STANDUP_DATA_PATH      - Snapshot file (default: bot_data.json)
    STANDUP_SENDER_BACKEND - ``discord`` or ``log`` (required by send-now)
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from standup import __version__
from standup.digest.composer import compose_digest, order_entries
from standup.digest.config import DigestConfig
from standup.digest.errors import StandupError
from standup.digest.models import ScheduleSettings
from standup.digest.persistence import JsonFileSnapshotStore

app = App(
    name="standup",
    help="Daily standup digest service",
    version=__version__,
)


def _resolve_config(data_path: Path | None) -> DigestConfig:
    config = DigestConfig.from_env()
    if data_path is None:
        return config
    return dataclasses.replace(config, data_path=data_path)


async def _show(data_path: Path) -> int:
    snapshot = await JsonFileSnapshotStore(data_path).load()
    if snapshot is None:
        settings = ScheduleSettings()
        entries = []
    else:
        hour, minute = snapshot.time_of_day
        settings = ScheduleSettings(
            hour=hour,
            minute=minute,
            destination=snapshot.destination,
            last_fired=snapshot.last_summary_date,
        )
        entries = order_entries(snapshot.standup_entries)

    print(f"Data file:     {data_path}")
    print(f"Summary time:  {settings.time_label}")
    print(f"Destination:   {settings.destination or '(not set)'}")
    last_fired = settings.last_fired.isoformat() if settings.last_fired else "never"
    print(f"Last summary:  {last_fired}")
    print(f"Pending:       {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")

    digest = compose_digest(entries)
    if digest is not None:
        print()
        print(digest)
    return 0


async def _send_now(config: DigestConfig) -> int:
    from standup.api.factory import build_components

    components = build_components(config)
    try:
        await components.service.load()
        try:
            outcome = await components.service.trigger_now()
        except StandupError as exc:
            print(f"Digest not sent: {exc}", file=sys.stderr)
            return 1
    finally:
        for close in components.closers:
            await close()

    print(f"Digest {outcome.status}: {outcome.entry_count} entries")
    if not outcome.persisted:
        print(
            f"Warning: state could not be saved to {config.data_path}",
            file=sys.stderr,
        )
    return 0


@app.command
def serve() -> int:
    """Start the HTTP server and the digest scheduler.

    Equivalent to ``python -m standup.runtime``; host, port and log level
    come from ``STANDUP_HOST``, ``STANDUP_PORT`` and ``STANDUP_LOG_LEVEL``.

    Returns:
        Exit code (0 after a clean shutdown).

    """
    from standup.runtime import main as runtime_main

    runtime_main()
    return 0


@app.command
def show(
    *,
    data_path: typ.Annotated[
        Path | None, Parameter(env_var="STANDUP_DATA_PATH")
    ] = None,
) -> int:
    """Print the saved schedule and the digest that would be sent.

    Args:
        data_path: Snapshot file to read.

    Returns:
        Exit code (0 for success).

    """
    config = _resolve_config(data_path)
    return asyncio.run(_show(config.data_path))


@app.command(name="send-now")
def send_now(
    *,
    data_path: typ.Annotated[
        Path | None, Parameter(env_var="STANDUP_DATA_PATH")
    ] = None,
) -> int:
    """Send the digest immediately using the saved state.

    Follows the same path as a scheduled digest: entries are cleared and
    the state saved only when delivery succeeds.

    Args:
        data_path: Snapshot file to read and update.

    Returns:
        Exit code (0 when sent or nothing to send, 1 on failure).

    """
    config = _resolve_config(data_path)
    return asyncio.run(_send_now(config))


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
