"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from hearing_relay.filtering import AllowList
from hearing_relay.models import HearingEvent
from hearing_relay.publishing import MessagePublisher
from hearing_relay.service import HearingRelayDependencies, HearingRelayService
from tests.helpers.fakes import RecordingTelemetry, RecordingTransport
from tests.helpers.hearing_events import (
    INCLUDED_COURTS,
    TEST_TOPIC,
    load_hearing_event,
)


@pytest.fixture
def hearing_event() -> HearingEvent:
    """Provide the minimal court application hearing event."""
    return load_hearing_event()


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    """Provide a telemetry emitter that records tracked events."""
    return RecordingTelemetry()


@pytest.fixture
def transport() -> RecordingTransport:
    """Provide a transport that records published messages."""
    return RecordingTransport()


@pytest.fixture
def publisher(transport: RecordingTransport) -> MessagePublisher:
    """Provide a message publisher bound to the recording transport."""
    return MessagePublisher(transport, topic=TEST_TOPIC)


@pytest.fixture
def included_allow_list() -> AllowList:
    """Provide an enabled allow-list containing the fixture's court."""
    return AllowList(court_codes=INCLUDED_COURTS, enabled=True)


@pytest.fixture
def relay_service(
    publisher: MessagePublisher,
    telemetry: RecordingTelemetry,
    included_allow_list: AllowList,
) -> HearingRelayService:
    """Provide a relay service wired to recording collaborators."""
    return HearingRelayService(
        HearingRelayDependencies(publisher=publisher, telemetry=telemetry),
        allow_list=included_allow_list,
    )
