"""Bearer-token authentication middleware for Falcon ASGI applications.

Every request outside the probe endpoints must carry an
``Authorization: Bearer <token>`` header. The token is checked by a
:class:`TokenVerifier`; the resulting :class:`Principal` must hold the
configured role. Failures raise ``AuthenticationError`` (401) or
``AuthorizationError`` (403) before the resource responder runs, so the
relay pipeline is never entered for rejected callers.

Usage
-----
Register the middleware when creating the Falcon app::

    verifier = JwtTokenVerifier(key=public_key_pem, algorithms=("RS256",))
    auth_mw = BearerAuthMiddleware(
        verifier, required_role="ROLE_COURT_HEARING_EVENT_WRITE"
    )
    app = falcon.asgi.App(middleware=[auth_mw])

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import jwt

from hearing_relay.api.errors import AuthenticationError, AuthorizationError
from hearing_relay.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "DEFAULT_EXEMPT_PATHS",
    "BearerAuthMiddleware",
    "JwtTokenVerifier",
    "Principal",
    "TokenVerifier",
]

logger = get_logger(__name__)

DEFAULT_EXEMPT_PATHS = frozenset({"/health", "/ready"})
_BEARER_SCHEME = "bearer"


@dc.dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller.

    Attributes
    ----------
    subject
        Token subject (``sub`` claim), when present.
    roles
        Roles granted to the caller.

    """

    subject: str | None
    roles: frozenset[str] = frozenset()


@typ.runtime_checkable
class TokenVerifier(typ.Protocol):
    """Protocol for turning a bearer token into a :class:`Principal`."""

    def verify(self, token: str) -> Principal:
        """Verify ``token`` and return the caller it identifies.

        Raises
        ------
        AuthenticationError
            If the token is malformed, expired or incorrectly signed.

        """
        ...


def _roles_from_claim(value: object) -> frozenset[str]:
    """Accept roles as a list of strings or a comma-separated string."""
    if isinstance(value, str):
        return frozenset(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, cabc.Iterable):
        return frozenset(str(item) for item in value)
    return frozenset()


class JwtTokenVerifier:
    """Verify signed JWTs with PyJWT.

    Parameters
    ----------
    key
        Verification key: a PEM public key for asymmetric algorithms or the
        shared secret for HMAC algorithms.
    algorithms
        Accepted signing algorithms.
    roles_claim
        Claim that lists the caller's roles.

    """

    def __init__(
        self,
        key: str,
        *,
        algorithms: cabc.Sequence[str] = ("RS256",),
        roles_claim: str = "authorities",
    ) -> None:
        """Store the key and decoding options."""
        self._key = key
        self._algorithms = list(algorithms)
        self._roles_claim = roles_claim

    def verify(self, token: str) -> Principal:
        """Decode ``token`` and build a principal from its claims."""
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=self._algorithms,
                options={"verify_aud": False},
            )
        except jwt.PyJWTError as exc:
            msg = f"invalid bearer token: {exc}"
            raise AuthenticationError(msg) from exc

        subject = claims.get("sub")
        return Principal(
            subject=None if subject is None else str(subject),
            roles=_roles_from_claim(claims.get(self._roles_claim)),
        )


class BearerAuthMiddleware:
    """Falcon middleware enforcing bearer-token authentication and a role.

    Parameters
    ----------
    verifier
        Verifies tokens and yields principals.
    required_role
        Role every authenticated caller must hold.
    exempt_paths
        Paths served without authentication (the probes by default).

    """

    def __init__(
        self,
        verifier: TokenVerifier,
        *,
        required_role: str,
        exempt_paths: cabc.Set[str] = DEFAULT_EXEMPT_PATHS,
    ) -> None:
        """Initialise the middleware with a verifier and the required role."""
        self._verifier = verifier
        self._required_role = required_role
        self._exempt_paths = frozenset(exempt_paths)

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Authenticate the request and attach ``req.context.principal``.

        Raises
        ------
        AuthenticationError
            If the header is missing or malformed, or the token is invalid.
        AuthorizationError
            If the caller does not hold the required role.

        """
        if req.path in self._exempt_paths:
            return

        token = self._bearer_token(req.get_header("Authorization"))
        principal = self._verifier.verify(token)
        if self._required_role not in principal.roles:
            log_info(
                logger,
                "Rejected %s %s: subject=%s lacks role %s",
                req.method,
                req.path,
                principal.subject,
                self._required_role,
            )
            raise AuthorizationError(self._required_role, subject=principal.subject)

        req.context.principal = principal

    @staticmethod
    def _bearer_token(header: str | None) -> str:
        if header is None or not header.strip():
            msg = "missing bearer token"
            raise AuthenticationError(msg)
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() != _BEARER_SCHEME or not token.strip():
            msg = "Authorization header must use the Bearer scheme"
            raise AuthenticationError(msg)
        return token.strip()
