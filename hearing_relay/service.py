"""Relay decision engine for inbound hearing events.

This module provides the HearingRelayService class, which runs one decision
cycle per inbound event:

1. Derive the routing facts (court code, hearing id, first case id/URN)
2. Record a telemetry event, whatever the outcome of the next step
3. Publish the event when its court code passes the allow-list

Filtered events are not an error: the caller sees the same success as for a
relayed event. Publish failures propagate after telemetry has been recorded.

Usage
-----
>>> service = HearingRelayService(
...     HearingRelayDependencies(publisher=publisher, telemetry=emitter),
...     allow_list=AllowList.from_codes(["B10JQ"], enabled=True),
... )
>>> await service.handle(EventKind.UPDATE, event)
>>> await service.handle_delete("59cb14a6-e8de-4615-9c9d-94fa5ef81ad2")

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from hearing_relay.errors import CourtCodeOutOfRangeError
from hearing_relay.filtering import COURT_CODE_LENGTH, AllowList
from hearing_relay.logging import get_logger, log_info, log_warning
from hearing_relay.models import EventKind
from hearing_relay.telemetry import TelemetryEventType, telemetry_event_type

if typ.TYPE_CHECKING:
    from hearing_relay.models import HearingEvent
    from hearing_relay.publishing.protocol import HearingEventPublisher
    from hearing_relay.telemetry import TelemetryEmitter

logger = get_logger(__name__)


def extract_court_code(centre_code: str) -> str:
    """Return the leading five characters of a court centre code.

    Raises
    ------
    CourtCodeOutOfRangeError
        If ``centre_code`` is shorter than five characters.

    """
    if len(centre_code) < COURT_CODE_LENGTH:
        raise CourtCodeOutOfRangeError(centre_code, COURT_CODE_LENGTH)
    return centre_code[:COURT_CODE_LENGTH]


@dc.dataclass(frozen=True, slots=True)
class RoutingFacts:
    """Values extracted from an event for telemetry and filtering.

    Attributes
    ----------
    court_code
        First five characters of the court centre code.
    hearing_id
        Hearing identifier from the payload.
    case_id
        Id of the first prosecution case, or None when there are no cases.
    case_urn
        URN of the first prosecution case, or None when there are no cases.

    """

    court_code: str
    hearing_id: str
    case_id: str | None = None
    case_urn: str | None = None

    @classmethod
    def from_event(cls, event: HearingEvent) -> RoutingFacts:
        """Extract routing facts; later prosecution cases are ignored."""
        hearing = event.hearing
        court_code = extract_court_code(hearing.court_centre.code)
        first_case = hearing.prosecution_cases[0] if hearing.prosecution_cases else None
        return cls(
            court_code=court_code,
            hearing_id=hearing.id,
            case_id=None if first_case is None else first_case.id,
            case_urn=(
                None
                if first_case is None
                else first_case.prosecution_case_identifier.case_urn
            ),
        )

    def as_properties(self) -> dict[str, str | None]:
        """Return the flat telemetry property mapping."""
        return {
            "courtCode": self.court_code,
            "hearingId": self.hearing_id,
            "caseId": self.case_id,
            "caseUrn": self.case_urn,
        }


@dc.dataclass(frozen=True, slots=True)
class HearingRelayDependencies:
    """Collaborators for HearingRelayService.

    Attributes
    ----------
    publisher
        Publishes relayed events to the downstream topic.
    telemetry
        Records one telemetry event per request.

    """

    publisher: HearingEventPublisher
    telemetry: TelemetryEmitter


class HearingRelayService:
    """Decide per event whether to relay it, recording telemetry every time."""

    def __init__(
        self,
        dependencies: HearingRelayDependencies,
        *,
        allow_list: AllowList | None = None,
    ) -> None:
        """Configure the service.

        Parameters
        ----------
        dependencies
            Publisher and telemetry collaborators.
        allow_list
            Court codes permitted to relay. Defaults to a disabled
            allow-list, which relays every event.

        """
        self._publisher = dependencies.publisher
        self._telemetry = dependencies.telemetry
        self._allow_list = allow_list if allow_list is not None else AllowList()

    @property
    def allow_list(self) -> AllowList:
        """Return the allow-list applied to every event."""
        return self._allow_list

    async def handle(self, kind: EventKind, event: HearingEvent) -> None:
        """Run one decision cycle for ``event``.

        Parameters
        ----------
        kind
            Lifecycle kind the event was received as.
        event
            Validated hearing event.

        Raises
        ------
        CourtCodeOutOfRangeError
            If the court centre code is shorter than five characters. No
            telemetry is recorded in that case.
        PublishError
            If the event qualified for relay and publishing failed.

        """
        facts = RoutingFacts.from_event(event)
        self._telemetry.track_event(telemetry_event_type(kind), facts.as_properties())

        if kind is EventKind.DELETE:
            return

        if not self._allow_list.permits(facts.court_code):
            log_info(
                logger,
                "Hearing %s for court %s not relayed: court not in allow-list",
                facts.hearing_id,
                facts.court_code,
            )
            return

        try:
            await self._publisher.publish(kind, event)
        except Exception as exc:
            log_warning(
                logger,
                "Relay of %s hearing %s for court %s failed: %s",
                kind,
                facts.hearing_id,
                facts.court_code,
                exc,
            )
            raise

    async def handle_delete(self, hearing_id: str) -> None:
        """Record telemetry for a hearing deletion.

        Deletions carry no body, so only the id is recorded. Nothing is
        published.
        """
        # TODO: publish deletions once subscribers agree a delete message type.
        self._telemetry.track_event(
            TelemetryEventType.COURT_HEARING_DELETE_EVENT_RECEIVED,
            {"id": hearing_id},
        )


__all__ = [
    "HearingRelayDependencies",
    "HearingRelayService",
    "RoutingFacts",
    "extract_court_code",
]
