"""API-layer exceptions and Falcon error handlers.

Domain errors raised by :mod:`standup.digest` are translated here into
HTTP responses, so resources can call the service and let failures
propagate.

Usage
-----
Register the handlers on the Falcon app::

    from standup.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from standup.digest.errors import (
    InvalidTimeError,
    NoDestinationConfiguredError,
    SendError,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "InvalidInputError",
    "UnauthorizedError",
    "handle_invalid_input",
    "handle_invalid_time",
    "handle_no_destination",
    "handle_send_error",
    "handle_unauthorized",
    "register_error_handlers",
]


class InvalidInputError(Exception):
    """Raised for request bodies that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class UnauthorizedError(Exception):
    """Raised when an administrative route is called without a valid token."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__("A valid administrator bearer token is required.")


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The validation exception containing reason and optional field.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_invalid_time(
    _req: Request,
    resp: Response,
    ex: InvalidTimeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidTimeError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Invalid time",
        "description": str(ex),
        "hour": ex.hour,
        "minute": ex.minute,
    }


async def handle_no_destination(
    _req: Request,
    resp: Response,
    ex: NoDestinationConfiguredError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NoDestinationConfiguredError`` to an HTTP 409 JSON response."""
    resp.status = falcon.HTTP_409
    resp.media = {
        "title": "No destination configured",
        "description": str(ex),
    }


async def handle_send_error(
    _req: Request,
    resp: Response,
    ex: SendError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``SendError`` to an HTTP 502 JSON response.

    The entries are still pending when this is returned; the response
    says so, so a caller can retry later without resubmitting.
    """
    resp.status = falcon.HTTP_502
    resp.media = {
        "title": "Digest delivery failed",
        "description": str(ex),
        "attempts": ex.attempts,
    }


async def handle_unauthorized(
    _req: Request,
    resp: Response,
    ex: UnauthorizedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UnauthorizedError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.set_header("WWW-Authenticate", "Bearer")
    resp.media = {
        "title": "Unauthorized",
        "description": str(ex),
    }


def register_error_handlers(app: App) -> None:
    """Install every API error handler on ``app``."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(InvalidTimeError, handle_invalid_time)
    app.add_error_handler(NoDestinationConfiguredError, handle_no_destination)
    app.add_error_handler(SendError, handle_send_error)
    app.add_error_handler(UnauthorizedError, handle_unauthorized)
