"""Standup HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that exposes standup submission, schedule
administration and the manual digest trigger.

Usage
-----
Create and run the application::

    from standup.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with command endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when a service is provided, the command endpoints.
"""

from standup.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
