"""Background scheduler that fires the daily digest.

The controller wakes every ``check_interval_s`` seconds and checks the
local time against the configured target. A window is skipped when the
persisted last-fired date is already today, so a restart or an earlier
manual trigger does not produce a second digest. Otherwise, inside the
eligible window it runs one digest cycle through the service:

- ``SENT``: sleep for ``cooldown_s``, which is longer than the window,
  so the same window cannot fire twice
- ``EMPTY``: back to the normal cadence; the cooldown is not consumed
- any error: logged, then back to the normal cadence so a later wake in
  the same window can try again

Errors never escape the loop.

Usage
-----
>>> controller = ScheduleController(service)
>>> controller.start()
>>> ...
>>> await controller.stop()

"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import typing as typ

from standup.common.time import localnow
from standup.digest.errors import StandupError
from standup.digest.schedule import is_within_window
from standup.digest.service import DigestStatus, DigestTrigger
from standup.logging import get_logger, log_exception, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from standup.digest.dispatcher import Sleeper
    from standup.digest.observability import DigestEventLogger
    from standup.digest.service import StandupService

logger = get_logger(__name__)


class ControllerState(enum.StrEnum):
    """Lifecycle of the scheduler between wakes."""

    IDLE = "idle"
    FIRING = "firing"
    COOLDOWN = "cooldown"


class ScheduleController:
    """Wake periodically and fire the digest once per eligible window."""

    def __init__(
        self,
        service: StandupService,
        *,
        event_logger: DigestEventLogger | None = None,
        clock: cabc.Callable[[], dt.datetime] = localnow,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Configure the controller.

        Parameters
        ----------
        service
            Service that owns the state and runs the digest cycle.
        event_logger
            Receives failed-cycle events; when omitted, failures go to the
            module logger.
        clock
            Local clock used for the eligibility test.
        sleep
            Awaitable sleep used between wakes.

        """
        self._service = service
        self._event_logger = event_logger
        self._clock = clock
        self._sleep = sleep
        self._state = ControllerState.IDLE
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ControllerState:
        """Return the current controller state."""
        return self._state

    @property
    def running(self) -> bool:
        """Return whether the background loop is active."""
        return self._task is not None and not self._task.done()

    async def tick(self, now: dt.datetime | None = None) -> float:
        """Run one wake and return how long to sleep before the next.

        Parameters
        ----------
        now
            Wake time; the injected clock is read when omitted.

        Returns
        -------
        float
            ``cooldown_s`` after a successful send, otherwise
            ``check_interval_s``.

        """
        config = self._service.config
        current = now or self._clock()
        settings = await self._service.settings()
        if not is_within_window(
            current,
            settings.hour,
            settings.minute,
            window_minutes=config.window_minutes,
        ):
            self._state = ControllerState.IDLE
            return config.check_interval_s
        if settings.last_fired == current.date():
            # Already delivered today, by this loop or a manual trigger.
            self._state = ControllerState.IDLE
            return config.check_interval_s

        self._state = ControllerState.FIRING
        try:
            outcome = await self._service.run_digest_cycle(DigestTrigger.SCHEDULED)
        except StandupError as exc:
            # The service has already emitted the structured failure event.
            if self._event_logger is None:
                log_exception(logger, "Scheduled digest failed", exc)
            self._state = ControllerState.IDLE
            return config.check_interval_s
        except Exception as exc:  # noqa: BLE001 - the loop must survive
            log_exception(logger, "Unexpected error in scheduled digest", exc)
            self._state = ControllerState.IDLE
            return config.check_interval_s

        if outcome.status is DigestStatus.SENT:
            self._state = ControllerState.COOLDOWN
            return config.cooldown_s
        self._state = ControllerState.IDLE
        return config.check_interval_s

    async def run_forever(self) -> None:
        """Wake, tick and sleep until cancelled."""
        log_info(logger, "Digest scheduler started")
        try:
            while True:
                delay = await self.tick()
                await self._sleep(delay)
        finally:
            self._state = ControllerState.IDLE
            log_info(logger, "Digest scheduler stopped")

    def start(self) -> None:
        """Start the loop as a background task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(
            self.run_forever(), name="standup-digest-scheduler"
        )

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
