"""Hearing event ingress resources."""

from hearing_relay.api.hearing.resources import (
    HearingDeleteResource,
    HearingResultResource,
    HearingUpdateResource,
)

__all__ = ["HearingDeleteResource", "HearingResultResource", "HearingUpdateResource"]
