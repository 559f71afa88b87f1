"""Telemetry events recorded for every inbound hearing request.

The relay engine calls a :class:`TelemetryEmitter` once per request, before
deciding whether to publish, so every accepted and every filtered event is
visible. Emitters own their failure handling: ``track_event`` must never
raise into the caller.

Usage
-----
>>> emitter = LoggingTelemetryEmitter()
>>> emitter.track_event(
...     TelemetryEventType.COURT_HEARING_UPDATE_EVENT_RECEIVED,
...     {"courtCode": "B10JQ", "hearingId": "59cb14a6", "caseId": None},
... )

"""

from __future__ import annotations

import enum
import typing as typ

from hearing_relay.logging import get_logger, log_info, log_warning
from hearing_relay.models import EventKind

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

TelemetryProperties = typ.Mapping[str, str | None]


class TelemetryEventType(enum.StrEnum):
    """Telemetry event names, one per hearing lifecycle kind."""

    COURT_HEARING_UPDATE_EVENT_RECEIVED = "CourtHearingUpdateEventReceived"
    COURT_HEARING_RESULT_EVENT_RECEIVED = "CourtHearingResultEventReceived"
    COURT_HEARING_DELETE_EVENT_RECEIVED = "CourtHearingDeleteEventReceived"


TELEMETRY_EVENT_TYPES: typ.Final[cabc.Mapping[EventKind, TelemetryEventType]] = {
    EventKind.UPDATE: TelemetryEventType.COURT_HEARING_UPDATE_EVENT_RECEIVED,
    EventKind.RESULT: TelemetryEventType.COURT_HEARING_RESULT_EVENT_RECEIVED,
    EventKind.DELETE: TelemetryEventType.COURT_HEARING_DELETE_EVENT_RECEIVED,
}


def telemetry_event_type(kind: EventKind) -> TelemetryEventType:
    """Return the telemetry event name recorded for ``kind``."""
    return TELEMETRY_EVENT_TYPES[kind]


@typ.runtime_checkable
class TelemetryEmitter(typ.Protocol):
    """Fire-and-forget sink for telemetry events."""

    def track_event(
        self,
        event_type: TelemetryEventType,
        properties: TelemetryProperties,
    ) -> None:
        """Record ``event_type`` with a flat mapping of properties.

        Implementations swallow their own failures.
        """
        ...


def _format_properties(properties: TelemetryProperties) -> str:
    return " ".join(f"{key}={value}" for key, value in properties.items())


class LoggingTelemetryEmitter:
    """Emit telemetry events as structured femtologging records."""

    def track_event(
        self,
        event_type: TelemetryEventType,
        properties: TelemetryProperties,
    ) -> None:
        """Log the event at INFO as ``[<event type>] key=value ...``.

        Parameters
        ----------
        event_type
            Telemetry event name.
        properties
            Flat property mapping; ``None`` values are rendered as ``None``.

        """
        try:
            log_info(
                logger,
                "[%s] %s",
                event_type,
                _format_properties(properties),
            )
        except Exception as exc:  # noqa: BLE001 - telemetry is best effort
            log_warning(
                logger,
                "Failed to record telemetry event %s: %s",
                event_type,
                exc,
                exc_info=exc,
            )


__all__ = [
    "TELEMETRY_EVENT_TYPES",
    "LoggingTelemetryEmitter",
    "TelemetryEmitter",
    "TelemetryEventType",
    "TelemetryProperties",
    "telemetry_event_type",
]
