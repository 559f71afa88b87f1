"""femtologging helpers shared by the relay service.

Every module obtains its logger through :func:`get_logger` and emits
pre-formatted, percent-interpolated messages so log lines look the same
whether they come from the HTTP layer, the relay engine or the telemetry
emitter.

Example:
>>> from hearing_relay.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Relayed hearing %s", "59cb14a6")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Log levels accepted by ``HEARING_RELAY_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_DEFAULT_LEVEL = LogLevel.INFO


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the upper-cased level and whether the input had to be replaced.

    Unknown, empty or missing levels fall back to ``INFO`` and are flagged
    so the caller can warn about them once logging is configured.
    """
    if not level or not level.strip():
        return (str(_DEFAULT_LEVEL), True)

    candidate = level.strip().upper()
    if candidate in LogLevel.__members__:
        return (candidate, False)
    return (str(_DEFAULT_LEVEL), True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root configuration.

    Parameters
    ----------
    level : str | None
        Raw level string, usually read from the environment.
    force : bool, optional
        Replace handlers that an earlier call installed.

    Returns
    -------
    tuple[str, bool]
        The level actually applied and a flag set when ``level`` was invalid.

    """
    applied, invalid = normalize_log_level(level)
    basicConfig(level=applied, force=force)
    return (applied, invalid)


class _SupportsLog(typ.Protocol):
    """Subset of the femtologging logger API used here."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def format_log_message(template: str, *args: object) -> str:
    """Interpolate ``args`` into ``template`` using ``%`` formatting."""
    return template % args if args else template


def _emit(
    logger: _SupportsLog,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    logger.log(
        level,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a DEBUG message."""
    _emit(logger, "DEBUG", template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message.

    Parameters
    ----------
    logger : _SupportsLog
        Destination logger.
    template : str
        Percent-style message template.
    *args : object
        Values interpolated into ``template``.
    exc_info : object | None, optional
        Exception to attach to the record.

    """
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message; arguments as for :func:`log_info`."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message; arguments as for :func:`log_info`."""
    _emit(logger, "ERROR", template, args, exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log ``message`` at ERROR with ``exc`` attached as ``exc_info``."""
    logger.log("ERROR", message, exc_info=exc, stack_info=False)


__all__ = [
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
