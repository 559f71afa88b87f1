"""Domain errors raised by the relay pipeline."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from hearing_relay.models import EventKind


class RelayError(Exception):
    """Base class for failures inside the decide-and-dispatch pipeline."""


class CourtCodeOutOfRangeError(RelayError, IndexError):
    """Raised when a court centre code is too short to yield a court code.

    Upstream validation only rejects blank codes, so a non-blank code with
    fewer than five characters reaches the relay engine and fails here. The
    code is reported as-is; it is never padded or truncated.

    Attributes
    ----------
    code
        The court centre code that could not be sliced.
    required_length
        Number of leading characters the court code is built from.

    """

    def __init__(self, code: str, required_length: int) -> None:
        """Record the offending code and the length that was required."""
        self.code = code
        self.required_length = required_length
        super().__init__(
            f"court centre code {code!r} is shorter than "
            f"{required_length} characters"
        )


class PublishError(RelayError):
    """Raised when the pub/sub transport fails to accept a message.

    Attributes
    ----------
    topic
        Topic identifier the message was addressed to.
    error_code
        Transport-specific error code when one was reported (for SNS, the
        ``Error.Code`` of the client error, e.g. ``NotFound`` or
        ``Throttling``).

    """

    def __init__(
        self,
        message: str,
        *,
        topic: str | None = None,
        error_code: str | None = None,
    ) -> None:
        """Initialise with a description and optional transport context."""
        self.topic = topic
        self.error_code = error_code
        super().__init__(message)


class UnsupportedEventKindError(RelayError):
    """Raised when publishing is requested for a kind with no message type."""

    def __init__(self, kind: EventKind) -> None:
        """Record the kind that has no publish contract."""
        self.kind = kind
        super().__init__(f"no publish contract is defined for {kind} events")


class ConfigError(ValueError):
    """Raised when relay configuration cannot be parsed."""


__all__ = [
    "ConfigError",
    "CourtCodeOutOfRangeError",
    "PublishError",
    "RelayError",
    "UnsupportedEventKindError",
]
