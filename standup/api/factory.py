"""Factory for building the standup service graph from the environment.

``build_components()`` wires the snapshot store, message sender,
dispatcher, service and scheduler from ``DigestConfig.from_env()`` and
``create_message_sender()``. The runtime and the CLI both use it, so
the HTTP server and ``standup send-now`` behave identically.

Usage
-----
Build the components for the API layer::

    from standup.api.factory import build_components

    components = build_components()
    app = create_app(components.app_dependencies(admin_token=token))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from standup.digest.config import DigestConfig
from standup.digest.controller import ScheduleController
from standup.digest.dispatcher import Dispatcher
from standup.digest.observability import DigestEventLogger
from standup.digest.persistence import JsonFileSnapshotStore
from standup.digest.service import StandupService, StandupServiceDependencies
from standup.transport.factory import create_message_sender

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from standup.api.app import AppDependencies
    from standup.transport.protocol import MessageSender

__all__ = ["StandupComponents", "build_components"]


@dc.dataclass(frozen=True, slots=True)
class StandupComponents:
    """The wired service graph.

    Attributes
    ----------
    service
        Standup service; its state is not yet loaded.
    controller
        Scheduler bound to ``service``.
    sender
        Transport used by the dispatcher.

    """

    service: StandupService
    controller: ScheduleController
    sender: MessageSender

    @property
    def closers(self) -> tuple[cabc.Callable[[], cabc.Awaitable[None]], ...]:
        """Return shutdown callbacks for resources the sender owns."""
        aclose = getattr(self.sender, "aclose", None)
        return (aclose,) if aclose is not None else ()

    def app_dependencies(self, *, admin_token: str | None) -> AppDependencies:
        """Return :class:`AppDependencies` for the HTTP app."""
        from standup.api.app import AppDependencies

        return AppDependencies(
            service=self.service,
            controller=self.controller,
            admin_token=admin_token,
            closers=self.closers,
        )


def build_components(
    config: DigestConfig | None = None,
    *,
    sender: MessageSender | None = None,
) -> StandupComponents:
    """Build the service graph.

    Parameters
    ----------
    config
        Digest configuration; read from the environment when omitted.
    sender
        Message transport; built by ``create_message_sender()`` when
        omitted.

    Returns
    -------
    StandupComponents
        Service, scheduler and sender sharing one event logger.

    """
    digest_config = config or DigestConfig.from_env()
    message_sender = sender or create_message_sender()
    event_logger = DigestEventLogger()

    dispatcher = Dispatcher(
        message_sender,
        max_attempts=digest_config.send_max_attempts,
        backoff_s=digest_config.send_backoff_s,
        event_logger=event_logger,
    )
    service = StandupService(
        StandupServiceDependencies(
            snapshot_store=JsonFileSnapshotStore(digest_config.data_path),
            dispatcher=dispatcher,
            event_logger=event_logger,
        ),
        config=digest_config,
    )
    controller = ScheduleController(service, event_logger=event_logger)
    return StandupComponents(
        service=service, controller=controller, sender=message_sender
    )
