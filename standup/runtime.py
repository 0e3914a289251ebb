"""Standup runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`standup.api.app.create_app` for application
construction while keeping the ``standup.runtime:create_app`` entrypoint
stable.

Configuration is driven by environment variables:

- ``STANDUP_HOST``: Bind address (default ``0.0.0.0``)
- ``STANDUP_PORT``: Listen port (default ``8080``)
- ``STANDUP_LOG_LEVEL``: Log level (default ``INFO``)
- ``STANDUP_ADMIN_TOKEN``: Bearer token for administrative routes
  (optional; routes are open when unset)
- ``STANDUP_SENDER_BACKEND`` and the ``STANDUP_*`` digest settings read
  by :func:`standup.api.factory.build_components`

Run the service directly with ``python -m standup.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from standup.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid STANDUP_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    The standup state is loaded and the scheduler started by the ASGI
    lifespan startup event, not here.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from standup.api.app import create_app as _create_api_app
    from standup.api.factory import build_components

    components = build_components()
    admin_token = os.environ.get("STANDUP_ADMIN_TOKEN") or None
    if admin_token is None:
        log_warning(
            logger,
            "STANDUP_ADMIN_TOKEN is not set; administrative routes are open",
        )
    return _create_api_app(components.app_dependencies(admin_token=admin_token))


def main() -> None:
    """Start the standup server using Granian.

    Reads ``STANDUP_HOST``, ``STANDUP_PORT``, and ``STANDUP_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("STANDUP_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("STANDUP_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("STANDUP_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid STANDUP_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting standup runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    # A single worker: the scheduler and entry store live in-process.
    server = Granian(
        "standup.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
        workers=1,
    )
    server.serve()


if __name__ == "__main__":
    main()
