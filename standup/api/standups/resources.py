"""Standup command resources.

Each resource is a thin adapter from HTTP onto
:class:`~standup.digest.service.StandupService`. Request bodies are
decoded with ``msgspec`` into typed structs; domain errors propagate to
the handlers in :mod:`standup.api.errors`.

Resources that change the schedule or force a digest set
``admin_only = True``; :class:`~standup.api.middleware.AdminTokenMiddleware`
enforces the bearer token for them.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/standups", StandupsResource(service))
    app.add_route("/schedule/destination", DestinationResource(service))
    app.add_route("/schedule/time", TimeResource(service))
    app.add_route("/digests/trigger", TriggerResource(service))

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from standup.api.errors import InvalidInputError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from standup.digest.models import ScheduleSettings
    from standup.digest.service import StandupService

__all__ = [
    "DestinationResource",
    "StandupsResource",
    "TimeResource",
    "TriggerResource",
]

NonEmptyStr = typ.Annotated[str, msgspec.Meta(min_length=1)]


class SubmitStandupRequest(msgspec.Struct, forbid_unknown_fields=True):
    """Body of ``POST /standups``."""

    user_id: NonEmptyStr
    display_name: NonEmptyStr
    did: str
    plan: str
    blockers: str


class SetDestinationRequest(msgspec.Struct, forbid_unknown_fields=True):
    """Body of ``PUT /schedule/destination``.

    Numeric channel IDs are accepted as integers for compatibility with
    clients that pass platform snowflakes through unchanged.
    """

    channel_id: NonEmptyStr | int


class SetTimeRequest(msgspec.Struct, forbid_unknown_fields=True):
    """Body of ``PUT /schedule/time``.

    Range checking is left to the service so out-of-range values produce
    the same error as every other caller sees.
    """

    hour: int
    minute: int


T = typ.TypeVar("T")


async def _decode_body(req: Request, body_type: type[T]) -> T:
    """Decode the request body into ``body_type``.

    Raises
    ------
    InvalidInputError
        If the body is not valid JSON or does not match ``body_type``.

    """
    payload = await req.stream.read()
    try:
        return msgspec.json.decode(payload, type=body_type)
    except msgspec.DecodeError as exc:
        raise InvalidInputError(str(exc)) from exc


def _serialize_settings(settings: ScheduleSettings) -> dict[str, typ.Any]:
    return {
        "destination": settings.destination,
        "time": settings.time_label,
        "hour": settings.hour,
        "minute": settings.minute,
        "last_fired": (
            settings.last_fired.isoformat() if settings.last_fired else None
        ),
    }


class StandupsResource:
    """``POST /standups`` submits a report; ``GET /standups`` lists them."""

    def __init__(self, service: StandupService) -> None:
        """Configure the resource with the standup service."""
        self._service = service

    async def on_post(self, req: Request, resp: Response) -> None:
        """Record the caller's standup, replacing any earlier one today."""
        body = await _decode_body(req, SubmitStandupRequest)
        result = await self._service.submit(
            user_id=body.user_id,
            display_name=body.display_name,
            did=body.did,
            plan=body.plan,
            blockers=body.blockers,
        )
        resp.status = falcon.HTTP_201
        resp.media = {
            "entry": msgspec.to_builtins(result.entry),
            "persisted": result.persisted,
        }

    async def on_get(self, _req: Request, resp: Response) -> None:
        """List pending entries in digest order with the schedule."""
        entries = await self._service.pending_entries()
        settings = await self._service.settings()
        resp.media = {
            "entries": msgspec.to_builtins(entries),
            "schedule": _serialize_settings(settings),
        }
        resp.status = falcon.HTTP_200


class DestinationResource:
    """``PUT /schedule/destination`` sets the digest channel."""

    admin_only = True

    def __init__(self, service: StandupService) -> None:
        """Configure the resource with the standup service."""
        self._service = service

    async def on_put(self, req: Request, resp: Response) -> None:
        """Replace the destination channel."""
        body = await _decode_body(req, SetDestinationRequest)
        result = await self._service.set_destination(str(body.channel_id))
        resp.media = {
            "schedule": _serialize_settings(result.settings),
            "persisted": result.persisted,
        }
        resp.status = falcon.HTTP_200


class TimeResource:
    """``PUT /schedule/time`` sets the daily digest time."""

    admin_only = True

    def __init__(self, service: StandupService) -> None:
        """Configure the resource with the standup service."""
        self._service = service

    async def on_put(self, req: Request, resp: Response) -> None:
        """Replace the digest time; out-of-range values map to HTTP 400."""
        body = await _decode_body(req, SetTimeRequest)
        result = await self._service.set_time(body.hour, body.minute)
        resp.media = {
            "schedule": _serialize_settings(result.settings),
            "persisted": result.persisted,
        }
        resp.status = falcon.HTTP_200


class TriggerResource:
    """``POST /digests/trigger`` runs one digest cycle immediately."""

    admin_only = True

    def __init__(self, service: StandupService) -> None:
        """Configure the resource with the standup service."""
        self._service = service

    async def on_post(self, _req: Request, resp: Response) -> None:
        """Compose and send the digest now, outside the schedule window."""
        outcome = await self._service.trigger_now()
        resp.media = {
            "status": str(outcome.status),
            "entry_count": outcome.entry_count,
            "attempts": outcome.attempts,
            "persisted": outcome.persisted,
        }
        resp.status = falcon.HTTP_200
