"""Hearing relay runtime entrypoint.

This module provides the ASGI application factory used by Granian and a
``main()`` that starts the server. Relay settings are loaded once through
:meth:`hearing_relay.config.RelayConfig.load`; when no publish topic is
configured the app starts in health-only mode.

Runtime settings are read from environment variables:

- ``HEARING_RELAY_HOST``: Bind address (default ``0.0.0.0``)
- ``HEARING_RELAY_PORT``: Listen port (default ``8080``)
- ``HEARING_RELAY_LOG_LEVEL``: Log level (default ``INFO``)

Run the service directly with ``python -m hearing_relay.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from hearing_relay.config import RelayConfig
from hearing_relay.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse a TCP port, exiting with status 1 when it is invalid."""
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid HEARING_RELAY_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the process configuration.

    Returns
    -------
    falcon.asgi.App
        The relay app, or a health-only app when no topic is configured.

    """
    from hearing_relay.api.app import create_app as _create_api_app
    from hearing_relay.api.factory import build_app_dependencies

    config = RelayConfig.load()
    if not config.publishing_enabled:
        log_warning(
            logger,
            "HEARING_RELAY_TOPIC_ARN is not set; starting in health-only mode",
        )
        return _create_api_app()

    log_info(
        logger,
        "Relaying to %s (allow-list enabled=%s, courts=%s)",
        config.topic_arn,
        config.allow_list.enabled,
        ",".join(sorted(config.allow_list.court_codes)) or "-",
    )
    return _create_api_app(build_app_dependencies(config))


def main() -> None:
    """Start the hearing relay server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("HEARING_RELAY_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("HEARING_RELAY_PORT", "8080"))
    log_level_str = os.environ.get("HEARING_RELAY_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid HEARING_RELAY_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting hearing relay on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "hearing_relay.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
