"""Unit tests for the relay decision engine."""

from __future__ import annotations

import pytest

from hearing_relay.errors import CourtCodeOutOfRangeError, PublishError
from hearing_relay.filtering import AllowList
from hearing_relay.models import EventKind, HearingEvent
from hearing_relay.service import (
    HearingRelayDependencies,
    HearingRelayService,
    RoutingFacts,
    extract_court_code,
)
from hearing_relay.telemetry import TelemetryEventType
from tests.helpers.fakes import RecordingPublisher, RecordingTelemetry
from tests.helpers.hearing_events import (
    CASE_ID,
    CASE_URN,
    HEARING_ID,
    INCLUDED_COURTS,
    NORTH_TYNESIDE,
    with_court_code,
    without_cases,
)

EXPECTED_PROPERTIES = {
    "courtCode": NORTH_TYNESIDE,
    "hearingId": HEARING_ID,
    "caseId": CASE_ID,
    "caseUrn": CASE_URN,
}


def _service(
    publisher: RecordingPublisher,
    telemetry: RecordingTelemetry,
    *,
    codes: frozenset[str] = INCLUDED_COURTS,
    enabled: bool = True,
) -> HearingRelayService:
    return HearingRelayService(
        HearingRelayDependencies(publisher=publisher, telemetry=telemetry),
        allow_list=AllowList(court_codes=codes, enabled=enabled),
    )


class TestExtractCourtCode:
    """Tests for ``extract_court_code``."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [("B10JQ12345", "B10JQ"), ("B10JQ", "B10JQ"), ("B33HU00", "B33HU")],
    )
    def test_returns_five_character_prefix(self, code: str, expected: str) -> None:
        """The court code is the first five characters."""
        assert extract_court_code(code) == expected

    @pytest.mark.parametrize("code", ["", "B", "B10J"])
    def test_short_codes_raise(self, code: str) -> None:
        """Codes shorter than five characters are not padded."""
        with pytest.raises(CourtCodeOutOfRangeError) as excinfo:
            extract_court_code(code)

        assert excinfo.value.code == code
        assert excinfo.value.required_length == 5
        assert isinstance(excinfo.value, IndexError)


class TestRoutingFacts:
    """Tests for ``RoutingFacts.from_event``."""

    def test_uses_first_prosecution_case_only(self, hearing_event: HearingEvent) -> None:
        """Only the first of several prosecution cases is inspected."""
        facts = RoutingFacts.from_event(hearing_event)

        assert len(hearing_event.hearing.prosecution_cases) == 2
        assert facts.as_properties() == EXPECTED_PROPERTIES

    def test_no_cases_gives_null_case_fields(self, hearing_event: HearingEvent) -> None:
        """Case id and URN are None when the hearing has no cases."""
        facts = RoutingFacts.from_event(without_cases(hearing_event))

        assert facts.case_id is None
        assert facts.case_urn is None


class TestHandle:
    """Tests for ``HearingRelayService.handle``."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("kind", "event_type"),
        [
            (EventKind.UPDATE, TelemetryEventType.COURT_HEARING_UPDATE_EVENT_RECEIVED),
            (EventKind.RESULT, TelemetryEventType.COURT_HEARING_RESULT_EVENT_RECEIVED),
        ],
    )
    async def test_included_court_tracks_and_publishes(
        self,
        hearing_event: HearingEvent,
        kind: EventKind,
        event_type: TelemetryEventType,
    ) -> None:
        """An allow-listed court is tracked once and published unchanged."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()

        await _service(publisher, telemetry).handle(kind, hearing_event)

        assert telemetry.events == [(event_type, EXPECTED_PROPERTIES)]
        assert publisher.calls == [(kind, hearing_event)]
        assert publisher.calls[0][1] is hearing_event

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", [EventKind.UPDATE, EventKind.RESULT])
    async def test_excluded_court_tracks_without_publishing(
        self, hearing_event: HearingEvent, kind: EventKind
    ) -> None:
        """A court missing from an enabled allow-list is tracked, not published."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()

        await _service(publisher, telemetry, codes=frozenset()).handle(
            kind, hearing_event
        )

        assert len(telemetry.events) == 1
        assert telemetry.events[0][1] == EXPECTED_PROPERTIES
        assert publisher.calls == []

    @pytest.mark.asyncio
    async def test_disabled_allow_list_publishes_everything(
        self, hearing_event: HearingEvent
    ) -> None:
        """A disabled allow-list relays even when it lists no courts."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()
        service = _service(publisher, telemetry, codes=frozenset(), enabled=False)

        await service.handle(EventKind.RESULT, hearing_event)

        assert len(telemetry.events) == 1
        assert publisher.calls == [(EventKind.RESULT, hearing_event)]

    @pytest.mark.asyncio
    async def test_unlisted_court_prefix_is_filtered(
        self, hearing_event: HearingEvent
    ) -> None:
        """Filtering compares the derived prefix, not the full centre code."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()
        event = with_court_code(hearing_event, "B01CX00")

        await _service(publisher, telemetry).handle(EventKind.UPDATE, event)

        assert telemetry.events[0][1]["courtCode"] == "B01CX"
        assert publisher.calls == []

    @pytest.mark.asyncio
    async def test_caseless_event_tracks_null_case_fields(
        self, hearing_event: HearingEvent
    ) -> None:
        """Events without prosecution cases are tracked with None fields."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()
        event = without_cases(hearing_event)

        await _service(publisher, telemetry).handle(EventKind.UPDATE, event)

        assert telemetry.events == [
            (
                TelemetryEventType.COURT_HEARING_UPDATE_EVENT_RECEIVED,
                {
                    "courtCode": NORTH_TYNESIDE,
                    "hearingId": HEARING_ID,
                    "caseId": None,
                    "caseUrn": None,
                },
            )
        ]
        assert publisher.calls == [(EventKind.UPDATE, event)]

    @pytest.mark.asyncio
    async def test_delete_kind_is_telemetry_only(
        self, hearing_event: HearingEvent
    ) -> None:
        """DELETE events are tracked but never published."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()

        await _service(publisher, telemetry).handle(EventKind.DELETE, hearing_event)

        assert telemetry.events == [
            (TelemetryEventType.COURT_HEARING_DELETE_EVENT_RECEIVED, EXPECTED_PROPERTIES)
        ]
        assert publisher.calls == []

    @pytest.mark.asyncio
    async def test_short_court_code_fails_before_telemetry(
        self, hearing_event: HearingEvent
    ) -> None:
        """A short code raises before anything is tracked or published."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()
        event = with_court_code(hearing_event, "B10")

        with pytest.raises(CourtCodeOutOfRangeError):
            await _service(publisher, telemetry).handle(EventKind.UPDATE, event)

        assert telemetry.events == []
        assert publisher.calls == []

    @pytest.mark.asyncio
    async def test_publish_error_propagates_after_telemetry(
        self, hearing_event: HearingEvent
    ) -> None:
        """Publish failures surface to the caller once telemetry is recorded."""
        publisher = RecordingPublisher(error=PublishError("throttled"))
        telemetry = RecordingTelemetry()

        with pytest.raises(PublishError, match="throttled"):
            await _service(publisher, telemetry).handle(EventKind.UPDATE, hearing_event)

        assert len(telemetry.events) == 1
        assert len(publisher.calls) == 1


class TestHandleDelete:
    """Tests for ``HearingRelayService.handle_delete``."""

    @pytest.mark.asyncio
    async def test_tracks_id_only(self) -> None:
        """Deletions record only the id and publish nothing."""
        publisher, telemetry = RecordingPublisher(), RecordingTelemetry()

        await _service(publisher, telemetry).handle_delete("abc")

        assert telemetry.events == [
            (TelemetryEventType.COURT_HEARING_DELETE_EVENT_RECEIVED, {"id": "abc"})
        ]
        assert publisher.calls == []


def test_default_allow_list_is_disabled() -> None:
    """Without an allow-list the service relays everything."""
    service = HearingRelayService(
        HearingRelayDependencies(
            publisher=RecordingPublisher(), telemetry=RecordingTelemetry()
        )
    )
    assert service.allow_list.enabled is False
