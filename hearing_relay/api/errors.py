"""API exceptions and Falcon error handlers.

Domain failures raised while handling a hearing request are mapped to HTTP
responses here. Every error body is JSON with ``title`` and
``description``; validation failures add an ``errors`` list.

Usage
-----
Register the handlers on the Falcon app::

    from hearing_relay.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from hearing_relay.errors import (
    CourtCodeOutOfRangeError,
    PublishError,
    UnsupportedEventKindError,
)
from hearing_relay.logging import get_logger, log_exception
from hearing_relay.validation import HearingValidationError

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "handle_authentication_error",
    "handle_authorization_error",
    "handle_court_code_out_of_range",
    "handle_publish_error",
    "handle_unsupported_event_kind",
    "handle_validation_error",
    "register_error_handlers",
]

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a request carries no usable bearer token (HTTP 401)."""

    def __init__(self, reason: str) -> None:
        """Initialise with a description of what was wrong with the token."""
        self.reason = reason
        super().__init__(reason)


class AuthorizationError(Exception):
    """Raised when an authenticated caller lacks the required role (HTTP 403).

    Attributes
    ----------
    required_role
        Role the endpoint requires.
    subject
        Token subject of the caller, when present.

    """

    def __init__(self, required_role: str, *, subject: str | None = None) -> None:
        """Initialise with the missing role and the caller's subject."""
        self.required_role = required_role
        self.subject = subject
        super().__init__(f"caller {subject or '<unknown>'} lacks role {required_role}")


async def handle_validation_error(
    _req: Request,
    resp: Response,
    ex: HearingValidationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``HearingValidationError`` to HTTP 400 with per-field errors."""
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Invalid hearing event",
        "description": str(ex),
        "errors": [{"field": e.field, "reason": e.reason} for e in ex.errors],
    }


async def handle_court_code_out_of_range(
    req: Request,
    resp: Response,
    ex: CourtCodeOutOfRangeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``CourtCodeOutOfRangeError`` to HTTP 500."""
    log_exception(logger, f"Cannot derive court code for {req.path}", ex)
    resp.status = falcon.HTTP_500
    resp.media = {
        "title": "Court code unavailable",
        "description": str(ex),
    }


async def handle_publish_error(
    req: Request,
    resp: Response,
    ex: PublishError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PublishError`` to HTTP 502 so the caller knows relay failed."""
    log_exception(logger, f"Relay failed for {req.path}", ex)
    resp.status = falcon.HTTP_502
    resp.media = {
        "title": "Relay failed",
        "description": str(ex),
    }


async def handle_unsupported_event_kind(
    req: Request,
    resp: Response,
    ex: UnsupportedEventKindError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UnsupportedEventKindError`` to HTTP 500."""
    log_exception(logger, f"Unsupported event kind for {req.path}", ex)
    resp.status = falcon.HTTP_500
    resp.media = {
        "title": "Unsupported event kind",
        "description": str(ex),
    }


async def handle_authentication_error(
    _req: Request,
    resp: Response,
    ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to HTTP 401 with a Bearer challenge."""
    resp.status = falcon.HTTP_401
    resp.set_header("WWW-Authenticate", "Bearer")
    resp.media = {
        "title": "Unauthorized",
        "description": ex.reason,
    }


async def handle_authorization_error(
    _req: Request,
    resp: Response,
    ex: AuthorizationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthorizationError`` to HTTP 403."""
    resp.status = falcon.HTTP_403
    resp.media = {
        "title": "Forbidden",
        "description": f"role {ex.required_role} is required",
    }


def register_error_handlers(app: App) -> None:
    """Register every handler in this module on ``app``."""
    app.add_error_handler(HearingValidationError, handle_validation_error)
    app.add_error_handler(CourtCodeOutOfRangeError, handle_court_code_out_of_range)
    app.add_error_handler(PublishError, handle_publish_error)
    app.add_error_handler(UnsupportedEventKindError, handle_unsupported_event_kind)
    app.add_error_handler(AuthenticationError, handle_authentication_error)
    app.add_error_handler(AuthorizationError, handle_authorization_error)
