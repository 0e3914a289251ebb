"""Structured observability events for the digest lifecycle.

``DigestEventLogger`` is the operator channel for the digest engine:
the scheduler reports failures through it instead of raising, so a bad
cycle never stops the loop.

Usage
-----
>>> event_logger = DigestEventLogger()
>>> event_logger.log_cycle_started(trigger="scheduled", entry_count=3)

"""

from __future__ import annotations

import enum
import typing as typ

from standup.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class DigestEventType(enum.StrEnum):
    """Structured log event types for digest cycles."""

    CYCLE_STARTED = "digest.cycle.started"
    CYCLE_SENT = "digest.cycle.sent"
    CYCLE_EMPTY = "digest.cycle.empty"
    CYCLE_FAILED = "digest.cycle.failed"
    SEND_RETRYING = "digest.send.retrying"
    PERSIST_FAILED = "digest.persist.failed"


class DigestEventLogger:
    """Emit structured digest events via femtologging."""

    def log_cycle_started(self, *, trigger: str, entry_count: int) -> None:
        """Log the start of a digest cycle.

        Parameters
        ----------
        trigger
            ``scheduled`` or ``manual``.
        entry_count
            Number of entries in the snapshot being composed.

        """
        log_info(
            logger,
            "[%s] trigger=%s entry_count=%d",
            DigestEventType.CYCLE_STARTED,
            trigger,
            entry_count,
        )

    def log_cycle_sent(
        self,
        *,
        trigger: str,
        destination: str,
        entry_count: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a digest that was delivered successfully."""
        log_info(
            logger,
            "[%s] trigger=%s destination=%s entry_count=%d duration_seconds=%.3f",
            DigestEventType.CYCLE_SENT,
            trigger,
            destination,
            entry_count,
            duration.total_seconds(),
        )

    def log_cycle_empty(self, *, trigger: str) -> None:
        """Log a cycle that found no entries to send."""
        log_info(
            logger,
            "[%s] trigger=%s No standup entries to summarize.",
            DigestEventType.CYCLE_EMPTY,
            trigger,
        )

    def log_cycle_failed(self, *, trigger: str, error: BaseException) -> None:
        """Log a cycle that ended in an error.

        Parameters
        ----------
        trigger
            ``scheduled`` or ``manual``.
        error
            Exception that ended the cycle.

        """
        log_error(
            logger,
            "[%s] trigger=%s error_type=%s error_message=%s",
            DigestEventType.CYCLE_FAILED,
            trigger,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_send_retrying(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay_s: float,
        error: BaseException,
    ) -> None:
        """Log a failed delivery attempt that will be retried."""
        log_warning(
            logger,
            "[%s] attempt=%d max_attempts=%d retry_in_seconds=%.1f error=%s",
            DigestEventType.SEND_RETRYING,
            attempt,
            max_attempts,
            delay_s,
            str(error),
        )

    def log_persist_failed(self, *, operation: str, error: BaseException) -> None:
        """Log a snapshot write that failed; in-memory state is unaffected."""
        log_error(
            logger,
            "[%s] operation=%s error=%s",
            DigestEventType.PERSIST_FAILED,
            operation,
            str(error),
            exc_info=error,
        )
