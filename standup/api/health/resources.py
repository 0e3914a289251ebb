"""Health probe resources for liveness and readiness checks.

``/health`` only says the process is up. ``/ready`` additionally reports
whether the digest scheduler is running, so an orchestrator can hold
traffic back until startup has restored state.

Usage
-----
Register health endpoints on the Falcon app::

    from standup.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(controller))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from standup.digest.controller import ScheduleController

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with liveness status.

        """
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Without a controller the app serves commands only and is always
    ready. With one, readiness follows the scheduler task: HTTP 503 with
    ``{"status": "starting"}`` until it is running.

    """

    def __init__(self, controller: ScheduleController | None = None) -> None:
        """Configure the probe with an optional scheduler to watch."""
        self._controller = controller

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        if self._controller is not None and not self._controller.running:
            resp.media = {"status": "starting"}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
            return
        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK
