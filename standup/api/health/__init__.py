"""Health probe resources for liveness and readiness checks.

Usage
-----
Import health resources for route registration::

    from standup.api.health.resources import HealthResource, ReadyResource
"""
