"""Ingress resources for hearing lifecycle events.

Routes
------
``POST /hearing/{hearing_id}``
    Hearing update; relayed as ``EventKind.UPDATE``.
``POST /hearing/{hearing_id}/result``
    Hearing result; relayed as ``EventKind.RESULT``.
``DELETE /hearing/{hearing_id}/delete``
    Hearing deletion; recorded in telemetry only.

Each responder returns 200 with an empty body once the relay service
completes, whether or not the event passed the allow-list. The path id is
logged next to the payload id but the two are not required to match.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/hearing/{hearing_id}", HearingUpdateResource(service))
    app.add_route("/hearing/{hearing_id}/result", HearingResultResource(service))
    app.add_route("/hearing/{hearing_id}/delete", HearingDeleteResource(service))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from hearing_relay.logging import get_logger, log_info
from hearing_relay.models import EventKind
from hearing_relay.validation import parse_hearing_event

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hearing_relay.service import HearingRelayService

__all__ = [
    "HearingDeleteResource",
    "HearingResultResource",
    "HearingUpdateResource",
]

logger = get_logger(__name__)


class _HearingEventResource:
    """Shared POST handling for update and result events."""

    kind: typ.ClassVar[EventKind]

    def __init__(self, service: HearingRelayService) -> None:
        """Configure the resource with the relay service.

        Parameters
        ----------
        service
            Relay decision engine that handles every decoded event.

        """
        self._service = service

    async def on_post(
        self,
        req: Request,
        resp: Response,
        *,
        hearing_id: str,
    ) -> None:
        """Decode, validate and relay a hearing event.

        Raises
        ------
        HearingValidationError
            If the body is not a valid hearing event (mapped to 400).

        """
        body = await req.stream.read()
        event = parse_hearing_event(body).unwrap()
        log_info(
            logger,
            "Received hearing %s event payload id: %s, path variable id: %s",
            self.kind,
            event.hearing.id,
            hearing_id,
        )

        await self._service.handle(self.kind, event)
        resp.status = HTTPStatus.OK


class HearingUpdateResource(_HearingEventResource):
    """``POST /hearing/{hearing_id}``."""

    kind = EventKind.UPDATE


class HearingResultResource(_HearingEventResource):
    """``POST /hearing/{hearing_id}/result``."""

    kind = EventKind.RESULT


class HearingDeleteResource:
    """``DELETE /hearing/{hearing_id}/delete``."""

    def __init__(self, service: HearingRelayService) -> None:
        """Configure the resource with the relay service."""
        self._service = service

    async def on_delete(
        self,
        _req: Request,
        resp: Response,
        *,
        hearing_id: str,
    ) -> None:
        """Record telemetry for the deletion and respond 200."""
        log_info(logger, "Received hearing delete request id: %s", hearing_id)
        await self._service.handle_delete(hearing_id)
        resp.status = HTTPStatus.OK
