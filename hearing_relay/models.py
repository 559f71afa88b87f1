"""Typed hearing event payloads.

The inbound JSON uses camelCase keys; the structs below decode it with
``rename="camel"`` and encode back to the same shape when the event is
republished. Keys the structs do not declare are ignored on decode.

Usage
-----
Decode a request body:

>>> event = msgspec.json.decode(body, type=HearingEvent)
>>> event.hearing.court_centre.code
'B10JQ12345'

"""

from __future__ import annotations

import enum

import msgspec


class EventKind(enum.StrEnum):
    """Lifecycle tag attached to a hearing event at dispatch time."""

    UPDATE = "update"
    RESULT = "result"
    DELETE = "delete"


class HearingType(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Hearing type reference data (e.g. sentence, trial)."""

    id: str
    description: str


class CourtCentre(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Court centre at which the hearing is listed.

    Attributes
    ----------
    id
        Internal court centre identifier.
    code
        Court centre code; the first five characters are the court code used
        for allow-list filtering.
    room_id
        Optional courtroom identifier.
    room_name
        Optional courtroom display name.

    """

    id: str
    code: str
    room_id: str | None = None
    room_name: str | None = None


class HearingDay(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """One sitting day of a hearing."""

    sitting_day: str | None = None
    listing_sequence: int | None = None
    listed_duration_minutes: int | None = None


class PersonDetails(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Personal details of an individual defendant."""

    title: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    date_of_birth: str | None = None
    gender: str | None = None


class PersonDefendant(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Wrapper present when the defendant is a person."""

    person_details: PersonDetails


class Defendant(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Defendant on a prosecution case."""

    id: str
    person_defendant: PersonDefendant | None = None


class ProsecutionCaseIdentifier(
    msgspec.Struct, kw_only=True, frozen=True, rename="camel"
):
    """Identifiers for a prosecution case.

    ``caseURN`` keeps its upper-case wire name.
    """

    case_urn: str = msgspec.field(name="caseURN")
    prosecution_authority_code: str | None = None


class ProsecutionCase(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Prosecution case heard at the hearing."""

    id: str
    prosecution_case_identifier: ProsecutionCaseIdentifier
    defendants: tuple[Defendant, ...] = ()


class Hearing(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A court hearing and the cases listed in it.

    Attributes
    ----------
    id
        Opaque hearing identifier.
    court_centre
        Where the hearing takes place.
    type
        Optional hearing type.
    jurisdiction_type
        Optional jurisdiction, e.g. ``CROWN`` or ``MAGISTRATES``.
    hearing_days
        Sitting days for the hearing.
    prosecution_cases
        Cases listed in the hearing; only the first is used for telemetry.

    """

    id: str
    court_centre: CourtCentre
    type: HearingType | None = None
    jurisdiction_type: str | None = None
    hearing_days: tuple[HearingDay, ...] = ()
    prosecution_cases: tuple[ProsecutionCase, ...] = ()


class HearingEvent(msgspec.Struct, kw_only=True, frozen=True):
    """Root payload posted by the case-management platform."""

    hearing: Hearing


__all__ = [
    "CourtCentre",
    "Defendant",
    "EventKind",
    "Hearing",
    "HearingDay",
    "HearingEvent",
    "HearingType",
    "PersonDefendant",
    "PersonDetails",
    "ProsecutionCase",
    "ProsecutionCaseIdentifier",
]
