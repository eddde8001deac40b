"""Log-level hints and the bridge onto :mod:`logging`."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal, Mapping, get_args

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .exceptions import HttpError

LogLevel = Literal["debug", "info", "notice", "warning", "error", "alert", "critical", "emergency"]

DEFAULT_LOG_LEVEL: LogLevel = "error"

NOTICE = 25
ALERT = 45
EMERGENCY = 60

LOG_LEVELS: Mapping[str, int] = MappingProxyType(
    {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "notice": NOTICE,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "alert": ALERT,
        "critical": logging.CRITICAL,
        "emergency": EMERGENCY,
    }
)

_LEVEL_NAMES: frozenset[str] = frozenset(get_args(LogLevel))


def ensure_log_level(level: object) -> LogLevel:
    """Return ``level`` if it is a known log-level name, raising ``ValueError`` otherwise."""

    if not isinstance(level, str) or level not in _LEVEL_NAMES:
        raise ValueError(f"Invalid log level: {level!r}")
    return level  # type: ignore[return-value]


def register_level_names() -> None:
    """Teach :mod:`logging` the names of the levels it does not define itself."""

    logging.addLevelName(NOTICE, "NOTICE")
    logging.addLevelName(ALERT, "ALERT")
    logging.addLevelName(EMERGENCY, "EMERGENCY")


def log_http_error(logger: logging.Logger, error: "HttpError") -> None:
    """Log ``error`` on ``logger`` at the level the error asks for.

    The serialized record is attached as ``http_error`` so structured handlers
    can pick it up; headers are never included.
    """

    level = LOG_LEVELS[error.log_level]
    if not logger.isEnabledFor(level):
        return
    exc_info = error if error.__traceback__ is not None else None
    logger.log(
        level,
        "%s %s: %s",
        error.status,
        error.name,
        error.message,
        exc_info=exc_info,
        extra={"http_error": error.to_json(), "http_error_stack": error.stack},
    )


__all__ = [
    "ALERT",
    "DEFAULT_LOG_LEVEL",
    "EMERGENCY",
    "LOG_LEVELS",
    "NOTICE",
    "LogLevel",
    "ensure_log_level",
    "log_http_error",
    "register_level_names",
]
