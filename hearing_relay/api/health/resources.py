"""Probe resources for container liveness and readiness checks.

The probes need no collaborators and are registered whether or not a
publish topic is configured. They are exempt from bearer authentication.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """``GET /health``: the process is alive."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Respond ``{"status": "ok"}``."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """``GET /ready``: the service can accept hearing events.

    Parameters
    ----------
    relay_enabled
        Whether hearing endpoints are registered. Reported in the body so
        operators can tell a health-only deployment apart.

    """

    def __init__(self, *, relay_enabled: bool = False) -> None:
        """Record whether the relay endpoints are active."""
        self._relay_enabled = relay_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Respond ``{"status": "ready", "relay": <bool>}``."""
        resp.media = {"status": "ready", "relay": self._relay_enabled}
        resp.status = HTTPStatus.OK
