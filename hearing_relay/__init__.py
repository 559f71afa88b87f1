"""Relay court hearing events from the case-management platform to SNS.

Public API
----------
AllowList
    Immutable court-code allow-list and its toggle.
EventKind
    Lifecycle tag (update, result, delete) attached at dispatch time.
HearingEvent
    Typed inbound payload.
HearingRelayService
    Decision engine: records telemetry for every event and publishes those
    that pass the allow-list.
RelayConfig
    Process configuration loaded once at startup.
should_relay
    Pure allow-list predicate.
"""

from hearing_relay.config import RelayConfig
from hearing_relay.filtering import AllowList, should_relay
from hearing_relay.models import EventKind, HearingEvent
from hearing_relay.service import HearingRelayDependencies, HearingRelayService

__all__ = [
    "AllowList",
    "EventKind",
    "HearingEvent",
    "HearingRelayDependencies",
    "HearingRelayService",
    "RelayConfig",
    "should_relay",
]
