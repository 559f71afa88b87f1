"""Build the relay service and token verifier from configuration.

Usage
-----
    from hearing_relay.api.factory import build_app_dependencies
    from hearing_relay.config import RelayConfig

    deps = build_app_dependencies(RelayConfig.from_env())

"""

from __future__ import annotations

import typing as typ

from hearing_relay.api.app import AppDependencies
from hearing_relay.logging import get_logger, log_warning
from hearing_relay.publishing import MessagePublisher, SnsPublishTransport
from hearing_relay.service import HearingRelayDependencies, HearingRelayService
from hearing_relay.telemetry import LoggingTelemetryEmitter

if typ.TYPE_CHECKING:
    from hearing_relay.api.auth import TokenVerifier
    from hearing_relay.config import RelayConfig
    from hearing_relay.publishing import PublishTransport
    from hearing_relay.telemetry import TelemetryEmitter

__all__ = ["build_app_dependencies", "build_relay_service", "build_token_verifier"]

logger = get_logger(__name__)


def build_relay_service(
    config: RelayConfig,
    *,
    transport: PublishTransport | None = None,
    telemetry: TelemetryEmitter | None = None,
) -> HearingRelayService:
    """Assemble a ``HearingRelayService`` for ``config``.

    Parameters
    ----------
    config
        Relay configuration; ``topic_arn`` must be set.
    transport
        Transport override. Defaults to an SNS transport for the configured
        region and endpoint.
    telemetry
        Telemetry override. Defaults to ``LoggingTelemetryEmitter``.

    Raises
    ------
    ValueError
        If ``config.topic_arn`` is not set.

    """
    if config.topic_arn is None:
        msg = "a topic ARN is required to build the relay service"
        raise ValueError(msg)

    if transport is None:
        transport = SnsPublishTransport.from_settings(
            region_name=config.aws_region,
            endpoint_url=config.aws_endpoint_url,
        )
    dependencies = HearingRelayDependencies(
        publisher=MessagePublisher(transport, topic=config.topic_arn),
        telemetry=telemetry if telemetry is not None else LoggingTelemetryEmitter(),
    )
    return HearingRelayService(dependencies, allow_list=config.allow_list)


def build_token_verifier(config: RelayConfig) -> TokenVerifier | None:
    """Return a JWT verifier, or None when no verification key is configured."""
    if config.jwt_key is None:
        return None

    from hearing_relay.api.auth import JwtTokenVerifier

    return JwtTokenVerifier(
        config.jwt_key,
        algorithms=config.jwt_algorithms,
        roles_claim=config.roles_claim,
    )


def build_app_dependencies(config: RelayConfig) -> AppDependencies:
    """Build application dependencies; health-only when no topic is set."""
    if not config.publishing_enabled:
        return AppDependencies()

    verifier = build_token_verifier(config)
    if verifier is None:
        log_warning(
            logger,
            "HEARING_RELAY_JWT_KEY is not set; hearing endpoints are unauthenticated",
        )
    return AppDependencies(
        relay_service=build_relay_service(config),
        token_verifier=verifier,
        required_role=config.required_role,
    )
