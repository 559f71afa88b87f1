"""Decode and validate inbound hearing event bodies.

Structural problems (malformed JSON, missing keys, wrong types) are
reported by msgspec while decoding; content rules that msgspec cannot
express, such as "must not be blank", are checked afterwards. Both kinds of
problem end up as :class:`FieldError` values on a :class:`ValidationResult`
so the HTTP layer can return them together.

Only blank court centre codes are rejected here. A non-blank code shorter
than five characters is accepted and fails later in the relay engine.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

import msgspec

from hearing_relay.models import HearingEvent

if typ.TYPE_CHECKING:
    from hearing_relay.models import Hearing, ProsecutionCase

_MISSING_FIELD = re.compile(r"missing required field `(?P<name>[^`]+)`")
_LOCATION_MARKER = " - at `"
_ROOT = "$"


@dc.dataclass(frozen=True, slots=True)
class FieldError:
    """A single validation failure.

    Attributes
    ----------
    field
        Dotted path to the offending field using wire names, e.g.
        ``hearing.courtCentre.code``. ``$`` denotes the whole body.
    reason
        Human-readable description of the failure.

    """

    field: str
    reason: str


class HearingValidationError(ValueError):
    """Raised when a hearing event body fails validation."""

    def __init__(self, errors: typ.Sequence[FieldError]) -> None:
        """Capture the field errors and build an aggregated message."""
        self.errors = tuple(errors)
        super().__init__("; ".join(f"{e.field}: {e.reason}" for e in self.errors))


@dc.dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a hearing event: a value or field errors."""

    value: HearingEvent | None = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when validation produced a value and no errors."""
        return self.value is not None and not self.errors

    @classmethod
    def success(cls, value: HearingEvent) -> ValidationResult:
        """Wrap a valid event."""
        return cls(value=value)

    @classmethod
    def failure(cls, *errors: FieldError) -> ValidationResult:
        """Wrap one or more field errors."""
        return cls(errors=tuple(errors))

    def unwrap(self) -> HearingEvent:
        """Return the event or raise :class:`HearingValidationError`."""
        if self.value is None or self.errors:
            raise HearingValidationError(self.errors)
        return self.value


def _field_error_from_msgspec(exc: msgspec.ValidationError) -> FieldError:
    """Translate a msgspec validation message into a :class:`FieldError`.

    msgspec reports errors as ``"<reason> - at `$.path`"``; for missing
    fields the field name only appears in the reason, so it is appended to
    the path.
    """
    reason, marker, location = str(exc).partition(_LOCATION_MARKER)
    path = location.rstrip("`") if marker else _ROOT

    missing = _MISSING_FIELD.search(reason)
    if missing is not None:
        path = f"{path}.{missing.group('name')}"
        reason = "must not be null"

    if path.startswith(f"{_ROOT}."):
        path = path[len(_ROOT) + 1 :]
    return FieldError(field=path, reason=reason)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_not_blank(
    value: str | None, field: str, errors: list[FieldError]
) -> None:
    if _is_blank(value):
        errors.append(FieldError(field=field, reason="must not be blank"))


def _validate_case(
    case: ProsecutionCase, prefix: str, errors: list[FieldError]
) -> None:
    _check_not_blank(case.id, f"{prefix}.id", errors)
    _check_not_blank(
        case.prosecution_case_identifier.case_urn,
        f"{prefix}.prosecutionCaseIdentifier.caseURN",
        errors,
    )
    for index, defendant in enumerate(case.defendants):
        _check_not_blank(defendant.id, f"{prefix}.defendants[{index}].id", errors)


def _validate_hearing(hearing: Hearing, errors: list[FieldError]) -> None:
    _check_not_blank(hearing.id, "hearing.id", errors)
    _check_not_blank(hearing.court_centre.id, "hearing.courtCentre.id", errors)
    _check_not_blank(hearing.court_centre.code, "hearing.courtCentre.code", errors)
    if hearing.type is not None:
        _check_not_blank(hearing.type.id, "hearing.type.id", errors)
    for index, case in enumerate(hearing.prosecution_cases):
        _validate_case(case, f"hearing.prosecutionCases[{index}]", errors)


def validate_hearing_event(event: HearingEvent) -> ValidationResult:
    """Apply content rules to an already decoded event."""
    errors: list[FieldError] = []
    _validate_hearing(event.hearing, errors)
    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success(event)


def parse_hearing_event(body: bytes) -> ValidationResult:
    """Decode ``body`` as JSON and validate it as a :class:`HearingEvent`.

    Parameters
    ----------
    body
        Raw request body.

    Returns
    -------
    ValidationResult
        The decoded event, or the field errors that prevented decoding or
        failed the content rules.

    """
    if not body.strip():
        return ValidationResult.failure(
            FieldError(field=_ROOT, reason="request body is empty")
        )

    try:
        event = msgspec.json.decode(body, type=HearingEvent)
    except msgspec.ValidationError as exc:
        return ValidationResult.failure(_field_error_from_msgspec(exc))
    except msgspec.DecodeError as exc:
        return ValidationResult.failure(
            FieldError(field=_ROOT, reason=f"malformed JSON: {exc}")
        )

    return validate_hearing_event(event)


__all__ = [
    "FieldError",
    "HearingValidationError",
    "ValidationResult",
    "parse_hearing_event",
    "validate_hearing_event",
]
