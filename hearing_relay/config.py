"""Process configuration for the hearing relay.

Configuration is read once at startup into an immutable
:class:`RelayConfig`, which is then injected into the relay service and the
HTTP layer. It can come from environment variables or from a YAML file.

Usage
-----
Load from the environment:

>>> import os
>>> os.environ["HEARING_RELAY_INCLUDED_COURT_CODES"] = "B10JQ,B33HU"
>>> os.environ["HEARING_RELAY_USE_INCLUDED_COURTS_LIST"] = "true"
>>> config = RelayConfig.from_env()
>>> config.allow_list.permits("B10JQ")
True

Or from YAML::

    included_court_codes: [B10JQ, B33HU]
    use_included_courts_list: true
    topic_arn: arn:aws:sns:eu-west-2:000000000000:hearing-events

>>> config = RelayConfig.from_yaml("relay.yaml")

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from hearing_relay.errors import ConfigError
from hearing_relay.filtering import AllowList

_ENV_PREFIX = "HEARING_RELAY_"
CONFIG_PATH_ENV = f"{_ENV_PREFIX}CONFIG_PATH"

DEFAULT_AWS_REGION = "eu-west-2"
DEFAULT_JWT_ALGORITHMS = ("RS256",)
DEFAULT_REQUIRED_ROLE = "ROLE_COURT_HEARING_EVENT_WRITE"
DEFAULT_ROLES_CLAIM = "authorities"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

YAML_VERSION = (1, 2)


class _ConfigFile(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Schema of the YAML configuration file."""

    included_court_codes: list[str] = msgspec.field(default_factory=list)
    use_included_courts_list: bool = False
    topic_arn: str | None = None
    aws_region: str = DEFAULT_AWS_REGION
    aws_endpoint_url: str | None = None
    jwt_key: str | None = None
    jwt_algorithms: list[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_JWT_ALGORITHMS)
    )
    required_role: str = DEFAULT_REQUIRED_ROLE
    roles_claim: str = DEFAULT_ROLES_CLAIM


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env(name: str) -> str | None:
    """Return a stripped environment value, treating blanks as unset."""
    raw = os.environ.get(f"{_ENV_PREFIX}{name}", "")
    return raw.strip() or None


def _parse_bool(name: str, *, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"{_ENV_PREFIX}{name} must be a boolean, got: {raw!r}"
    raise ConfigError(msg)


@dc.dataclass(frozen=True, slots=True)
class RelayConfig:
    """Immutable relay configuration.

    Attributes
    ----------
    allow_list
        Court codes permitted to relay and whether filtering is enabled.
    topic_arn
        SNS topic relayed events are published to. When None the service
        starts with health endpoints only.
    aws_region
        AWS region for the SNS client.
    aws_endpoint_url
        Optional SNS endpoint override, e.g. a LocalStack URL.
    jwt_key
        Key used to verify bearer tokens (PEM public key or shared secret).
        When None, requests are not authenticated.
    jwt_algorithms
        Accepted JWT signing algorithms.
    required_role
        Role a token must carry to call the hearing endpoints.
    roles_claim
        Token claim holding the caller's roles.

    """

    allow_list: AllowList = dc.field(default_factory=AllowList)
    topic_arn: str | None = None
    aws_region: str = DEFAULT_AWS_REGION
    aws_endpoint_url: str | None = None
    jwt_key: str | None = None
    jwt_algorithms: tuple[str, ...] = DEFAULT_JWT_ALGORITHMS
    required_role: str = DEFAULT_REQUIRED_ROLE
    roles_claim: str = DEFAULT_ROLES_CLAIM

    @property
    def publishing_enabled(self) -> bool:
        """Return True when a destination topic is configured."""
        return self.topic_arn is not None

    @property
    def auth_enabled(self) -> bool:
        """Return True when bearer tokens are verified."""
        return self.jwt_key is not None

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create configuration from ``HEARING_RELAY_*`` environment variables.

        Reads ``INCLUDED_COURT_CODES`` (comma separated),
        ``USE_INCLUDED_COURTS_LIST``, ``TOPIC_ARN``, ``AWS_REGION``,
        ``AWS_ENDPOINT_URL``, ``JWT_KEY``, ``JWT_ALGORITHMS`` (comma
        separated), ``REQUIRED_ROLE`` and ``ROLES_CLAIM``.

        Raises
        ------
        ConfigError
            If ``USE_INCLUDED_COURTS_LIST`` is not a recognised boolean.

        """
        allow_list = AllowList.from_codes(
            _split_csv(_env("INCLUDED_COURT_CODES") or ""),
            enabled=_parse_bool("USE_INCLUDED_COURTS_LIST", default=False),
        )
        algorithms = _split_csv(_env("JWT_ALGORITHMS") or "")
        return cls(
            allow_list=allow_list,
            topic_arn=_env("TOPIC_ARN"),
            aws_region=_env("AWS_REGION") or DEFAULT_AWS_REGION,
            aws_endpoint_url=_env("AWS_ENDPOINT_URL"),
            jwt_key=_env("JWT_KEY"),
            jwt_algorithms=algorithms or DEFAULT_JWT_ALGORITHMS,
            required_role=_env("REQUIRED_ROLE") or DEFAULT_REQUIRED_ROLE,
            roles_claim=_env("ROLES_CLAIM") or DEFAULT_ROLES_CLAIM,
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> RelayConfig:
        """Create configuration from a YAML 1.2 file.

        Raises
        ------
        ConfigError
            If the file cannot be read or parsed, or does not match the
            expected schema.

        """
        yaml = YAML(typ="safe")
        yaml.version = YAML_VERSION
        yaml.allow_duplicate_keys = False
        try:
            loaded = yaml.load(Path(path).read_text(encoding="utf-8"))
        except (OSError, YAMLError) as exc:
            msg = f"failed to read relay configuration {path}: {exc}"
            raise ConfigError(msg) from exc

        try:
            raw = msgspec.convert(loaded or {}, type=_ConfigFile)
        except msgspec.ValidationError as exc:
            msg = f"invalid relay configuration {path}: {exc}"
            raise ConfigError(msg) from exc

        return cls(
            allow_list=AllowList.from_codes(
                raw.included_court_codes, enabled=raw.use_included_courts_list
            ),
            topic_arn=raw.topic_arn,
            aws_region=raw.aws_region,
            aws_endpoint_url=raw.aws_endpoint_url,
            jwt_key=raw.jwt_key,
            jwt_algorithms=tuple(raw.jwt_algorithms) or DEFAULT_JWT_ALGORITHMS,
            required_role=raw.required_role,
            roles_claim=raw.roles_claim,
        )

    @classmethod
    def load(cls) -> RelayConfig:
        """Load from ``HEARING_RELAY_CONFIG_PATH`` when set, else the environment."""
        config_path = _env("CONFIG_PATH")
        if config_path is not None:
            return cls.from_yaml(config_path)
        return cls.from_env()


__all__ = ["CONFIG_PATH_ENV", "RelayConfig"]
