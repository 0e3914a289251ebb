"""Application factory for the standup Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when a
:class:`~standup.digest.service.StandupService` is supplied, the standup
command endpoints.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with command endpoints and the scheduler::

    from standup.api.app import AppDependencies, create_app

    deps = AppDependencies(
        service=service,
        controller=ScheduleController(service),
        admin_token=os.environ.get("STANDUP_ADMIN_TOKEN"),
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from standup.api.errors import register_error_handlers
from standup.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from standup.digest.controller import ScheduleController
    from standup.digest.service import StandupService

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    service
        Standup service backing the command endpoints.
    controller
        Optional scheduler run for the lifetime of the app.
    admin_token
        Bearer token required by administrative routes; ``None`` leaves
        them open.
    closers
        Awaitable callbacks run at shutdown.

    """

    service: StandupService
    controller: ScheduleController | None = None
    admin_token: str | None = None
    closers: cabc.Sequence[cabc.Callable[[], cabc.Awaitable[None]]] = ()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When *dependencies* is provided the app registers the lifespan and
    admin-token middleware and the ``/standups``, ``/schedule/*`` and
    ``/digests/trigger`` routes. Otherwise only ``/health`` and
    ``/ready`` are registered.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []

    if dependencies is not None:
        from standup.api.middleware import AdminTokenMiddleware, ServiceLifespan

        middleware.append(
            ServiceLifespan(
                dependencies.service,
                controller=dependencies.controller,
                closers=dependencies.closers,
            )
        )
        middleware.append(AdminTokenMiddleware(dependencies.admin_token))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route(
        "/ready",
        ReadyResource(dependencies.controller if dependencies is not None else None),
    )

    if dependencies is not None:
        from standup.api.standups.resources import (
            DestinationResource,
            StandupsResource,
            TimeResource,
            TriggerResource,
        )

        service = dependencies.service
        app.add_route("/standups", StandupsResource(service))
        app.add_route("/schedule/destination", DestinationResource(service))
        app.add_route("/schedule/time", TimeResource(service))
        app.add_route("/digests/trigger", TriggerResource(service))

    register_error_handlers(app)

    return app
