"""Application factory for the hearing relay Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with probe endpoints and, when a relay service is supplied,
the hearing ingress endpoints.

Usage
-----
Create a health-only app (no publish topic configured)::

    app = create_app()

Create a full app::

    from hearing_relay.api.app import AppDependencies, create_app

    deps = AppDependencies(relay_service=service, token_verifier=verifier)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from hearing_relay.api.errors import register_error_handlers
from hearing_relay.api.health.resources import HealthResource, ReadyResource
from hearing_relay.config import DEFAULT_REQUIRED_ROLE

if typ.TYPE_CHECKING:
    from hearing_relay.api.auth import TokenVerifier
    from hearing_relay.service import HearingRelayService

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    relay_service
        Relay decision engine. When None only the probes are registered.
    token_verifier
        Verifies bearer tokens. When None requests are not authenticated.
    required_role
        Role callers must hold when a verifier is configured.

    """

    relay_service: HearingRelayService | None = None
    token_verifier: TokenVerifier | None = None
    required_role: str = DEFAULT_REQUIRED_ROLE


def _build_middleware(deps: AppDependencies) -> list[object]:
    if deps.token_verifier is None:
        return []

    from hearing_relay.api.auth import BearerAuthMiddleware

    return [BearerAuthMiddleware(deps.token_verifier, required_role=deps.required_role)]


def _add_hearing_routes(app: falcon.asgi.App, service: HearingRelayService) -> None:
    from hearing_relay.api.hearing.resources import (
        HearingDeleteResource,
        HearingResultResource,
        HearingUpdateResource,
    )

    app.add_route("/hearing/{hearing_id}", HearingUpdateResource(service))
    app.add_route("/hearing/{hearing_id}/result", HearingResultResource(service))
    app.add_route("/hearing/{hearing_id}/delete", HearingDeleteResource(service))


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a relay
        service, only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies if dependencies is not None else AppDependencies()
    app = falcon.asgi.App(middleware=_build_middleware(deps))  # type: ignore[no-matching-overload]  # Falcon stubs

    relay_enabled = deps.relay_service is not None
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(relay_enabled=relay_enabled))

    if deps.relay_service is not None:
        _add_hearing_routes(app, deps.relay_service)

    register_error_handlers(app)
    return app
