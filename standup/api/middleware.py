"""Falcon ASGI middleware for the standup API.

``AdminTokenMiddleware`` guards resources that set ``admin_only = True``
with a bearer token. ``ServiceLifespan`` hooks the ASGI lifespan events:
startup restores the persisted state and starts the digest scheduler,
shutdown stops the scheduler and closes any transport clients.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(
        middleware=[
            ServiceLifespan(service, controller=controller),
            AdminTokenMiddleware(os.environ.get("STANDUP_ADMIN_TOKEN")),
        ]
    )

"""

from __future__ import annotations

import secrets
import typing as typ

from standup.api.errors import UnauthorizedError
from standup.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from standup.digest.controller import ScheduleController
    from standup.digest.service import StandupService

__all__ = ["AdminTokenMiddleware", "ServiceLifespan"]

logger = get_logger(__name__)

_BEARER_PREFIX = "bearer "


class AdminTokenMiddleware:
    """Require ``Authorization: Bearer <token>`` on administrative resources.

    Parameters
    ----------
    token
        Expected token. When ``None`` or empty, every request is allowed;
        the permission check then belongs to whatever fronts the API.

    """

    def __init__(self, token: str | None) -> None:
        """Initialize the middleware with the expected token."""
        self._token = token or None

    @property
    def enabled(self) -> bool:
        """Return whether a token is being enforced."""
        return self._token is not None

    async def process_resource(
        self,
        req: Request,
        _resp: Response,
        resource: object,
        _params: dict[str, typ.Any],
    ) -> None:
        """Reject the request if the resource is admin-only and unauthorized.

        Raises
        ------
        UnauthorizedError
            If the bearer token is missing or does not match.

        """
        if self._token is None or not getattr(resource, "admin_only", False):
            return
        if not self._is_authorized(req.get_header("Authorization")):
            log_warning(
                logger,
                "Rejected unauthorized %s %s",
                req.method,
                req.path,
            )
            raise UnauthorizedError

    def _is_authorized(self, header: str | None) -> bool:
        if self._token is None:
            return True
        if header is None or not header.lower().startswith(_BEARER_PREFIX):
            return False
        supplied = header[len(_BEARER_PREFIX) :].strip()
        return secrets.compare_digest(supplied.encode(), self._token.encode())


class ServiceLifespan:
    """Restore state and run the scheduler for the lifetime of the app.

    Parameters
    ----------
    service
        Service whose persisted state is loaded on startup.
    controller
        Scheduler started on startup and stopped on shutdown; omit to
        serve commands only.
    closers
        Awaitable callbacks run on shutdown, such as an HTTP client's
        ``aclose``.

    """

    def __init__(
        self,
        service: StandupService,
        *,
        controller: ScheduleController | None = None,
        closers: cabc.Sequence[cabc.Callable[[], cabc.Awaitable[None]]] = (),
    ) -> None:
        """Initialize the lifespan hooks."""
        self._service = service
        self._controller = controller
        self._closers = tuple(closers)
        self._loaded = False

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Load the persisted state once and start the scheduler."""
        if not self._loaded:
            restored = await self._service.load()
            self._loaded = True
            log_info(
                logger,
                "Standup state %s",
                "restored from snapshot" if restored else "initialised with defaults",
            )
        if self._controller is not None:
            self._controller.start()

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Stop the scheduler, then run the shutdown callbacks."""
        if self._controller is not None:
            await self._controller.stop()
        for close in self._closers:
            await close()
