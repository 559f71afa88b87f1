"""Liveness and readiness probes.

Usage
-----
    from hearing_relay.api.health import HealthResource, ReadyResource
"""

from hearing_relay.api.health.resources import HealthResource, ReadyResource

__all__ = ["HealthResource", "ReadyResource"]
