"""Structured HTTP errors with obstructions, log-level hints and a JSON wire form."""

from .exceptions import (
    DEFAULT_STATUS,
    HTTP_ERROR_TAG,
    ErrorMeta,
    HttpError,
    HttpErrorJSON,
    Obstruction,
    UnregisteredStatusError,
    coerce_meta,
    coerce_obstruction,
    is_http_error,
)
from .http import (
    HTTP_ERROR_STATUSES,
    HttpErrorStatus,
    ensure_status,
    error_code,
    error_name,
    is_error_status,
    reason_phrase,
)
from .logs import DEFAULT_LOG_LEVEL, LOG_LEVELS, LogLevel, log_http_error, register_level_names
from .serialization import json_decode, json_encode, to_builtins

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_STATUS",
    "HTTP_ERROR_STATUSES",
    "HTTP_ERROR_TAG",
    "LOG_LEVELS",
    "ErrorMeta",
    "HttpError",
    "HttpErrorJSON",
    "HttpErrorStatus",
    "LogLevel",
    "Obstruction",
    "UnregisteredStatusError",
    "coerce_meta",
    "coerce_obstruction",
    "ensure_status",
    "error_code",
    "error_name",
    "is_error_status",
    "is_http_error",
    "json_decode",
    "json_encode",
    "log_http_error",
    "reason_phrase",
    "register_level_names",
    "to_builtins",
]
