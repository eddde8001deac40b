"""Structured HTTP error values."""

from __future__ import annotations

import logging
import traceback
from typing import Annotated, Any, Final, Mapping, TypeGuard, Union

import msgspec
from msgspec import UNSET, UnsetType

from .http import HttpErrorStatus, ensure_status, error_code, error_name, is_error_status
from .logs import DEFAULT_LOG_LEVEL, LOG_LEVELS, LogLevel, ensure_log_level
from .serialization import json_decode, json_encode, to_builtins

logger = logging.getLogger(__name__)

HTTP_ERROR_TAG: Final = "HttpError"
DEFAULT_STATUS: Final = int(HttpErrorStatus.INTERNAL_SERVER_ERROR)

DataTypes = Mapping[str, Any]


class Obstruction(msgspec.Struct):
    """A machine-readable reason keeping the caller from doing what they asked.

    ``code`` selects the shape of ``data``. Obstructions without parameters
    leave ``data`` unset and it is omitted from the encoded form.
    """

    code: str
    text: str
    data: Any = UNSET


class ErrorMeta(msgspec.Struct, frozen=True, kw_only=True):
    """Optional metadata accepted wherever an :class:`HttpError` is created."""

    subcode: str | None = None
    log_level: LogLevel = DEFAULT_LOG_LEVEL
    obstructions: tuple[Obstruction | Mapping[str, Any], ...] = ()
    headers: Mapping[str, str] = msgspec.field(default_factory=dict)


MetaLike = Union[ErrorMeta, Mapping[str, Any]]


class HttpErrorJSON(msgspec.Struct, kw_only=True, rename={"log_level": "logLevel"}):
    """Wire record of an :class:`HttpError`.

    Headers and the diagnostic trace are never part of the record.
    """

    tag: str = HTTP_ERROR_TAG
    name: str | UnsetType = UNSET
    status: Annotated[int, msgspec.Meta(ge=100, le=599)] = DEFAULT_STATUS
    subcode: str | None | UnsetType = UNSET
    log_level: str = DEFAULT_LOG_LEVEL
    obstructions: list[Obstruction] = msgspec.field(default_factory=list)
    message: str = ""


def coerce_obstruction(value: Obstruction | Mapping[str, Any], data_types: DataTypes | None = None) -> Obstruction:
    """Return ``value`` as an :class:`Obstruction`, validating its ``data`` by code."""

    if isinstance(value, Obstruction):
        obstruction = value
        if not isinstance(obstruction.code, str) or not isinstance(obstruction.text, str):
            raise ValueError(f"Obstruction code and text must be strings: {obstruction!r}")
    elif isinstance(value, Mapping):
        try:
            obstruction = msgspec.convert(dict(value), type=Obstruction)
        except msgspec.ValidationError as exc:
            raise ValueError(f"Invalid obstruction {dict(value)!r}: {exc}") from exc
    else:
        raise TypeError(f"Expected an Obstruction or mapping, got {type(value).__name__}")
    if not data_types or obstruction.data is UNSET:
        return obstruction
    data_type = data_types.get(obstruction.code)
    if data_type is None:
        return obstruction
    if isinstance(data_type, type) and isinstance(obstruction.data, data_type):
        return obstruction
    data = msgspec.convert(obstruction.data, type=data_type)
    return Obstruction(obstruction.code, obstruction.text, data)


def coerce_meta(meta: MetaLike | None) -> ErrorMeta:
    """Normalize and validate ``meta`` into an :class:`ErrorMeta`, ignoring unknown keys."""

    if meta is None:
        return ErrorMeta()
    if isinstance(meta, ErrorMeta):
        subcode, log_level = meta.subcode, meta.log_level
        obstructions, headers = meta.obstructions, meta.headers
    elif isinstance(meta, Mapping):
        subcode = meta.get("subcode")
        log_level = meta.get("log_level")
        if log_level is None:
            log_level = meta.get("logLevel")
        obstructions = meta.get("obstructions") or ()
        headers = meta.get("headers") or {}
    else:
        raise TypeError(f"Expected ErrorMeta or a mapping, got {type(meta).__name__}")
    return ErrorMeta(
        subcode=_convert_option(subcode, Union[str, None], "subcode"),
        log_level=DEFAULT_LOG_LEVEL if log_level is None else ensure_log_level(log_level),
        obstructions=tuple(coerce_obstruction(item) for item in obstructions),
        headers=_convert_option(dict(headers) if isinstance(headers, Mapping) else headers, dict[str, str], "headers"),
    )


def _convert_option(value: Any, annotation: Any, option: str) -> Any:
    try:
        return msgspec.convert(value, type=annotation)
    except msgspec.ValidationError as exc:
        raise ValueError(f"Invalid {option}: {exc}") from exc


def _capture_stack() -> str:
    # drop this helper and HttpError.__init__
    return "".join(traceback.format_stack()[:-2])


def _describe_trace(error: BaseException) -> str:
    existing = getattr(error, "stack", None)
    if isinstance(existing, str):
        return existing
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def _rebuild(cls: type["HttpError"], status: int, message: str) -> "HttpError":
    return cls(status, message)


class HttpError(Exception):
    """An error carrying everything needed to answer an HTTP request with it.

    ``name`` always follows ``status``. ``obstructions``, ``headers`` and
    ``log_level`` may be changed while the error travels through handlers;
    the rest is fixed at construction.
    """

    def __init__(self, status: int | HttpErrorStatus, message: str = "", meta: MetaLike | None = None) -> None:
        status_code = self._check_status(status)
        if not isinstance(message, str):
            raise TypeError(f"Expected message to be a str, got {type(message).__name__}")
        super().__init__(message)
        options = coerce_meta(meta)
        self._status = status_code
        self.message = message
        self._subcode = options.subcode
        self._log_level: LogLevel = ensure_log_level(options.log_level)
        self.obstructions: list[Obstruction] = list(options.obstructions)  # type: ignore[arg-type]
        self.headers: dict[str, str] = dict(options.headers)
        self.stack = _capture_stack()

    @classmethod
    def _check_status(cls, status: int | HttpErrorStatus) -> int:
        if not is_error_status(status):
            raise ValueError(f"Unsupported HTTP error status: {status!r}")
        return int(status)

    @property
    def tag(self) -> str:
        return HTTP_ERROR_TAG

    @property
    def status(self) -> int:
        return self._status

    @property
    def name(self) -> str:
        return error_name(self._status)

    @property
    def code(self) -> str:
        return error_code(self._status)

    @property
    def subcode(self) -> str | None:
        return self._subcode

    @property
    def log_level(self) -> LogLevel:
        return self._log_level

    @log_level.setter
    def log_level(self, value: LogLevel) -> None:
        self._log_level = ensure_log_level(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self._status}, name={self.name!r}, message={self.message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (type(self), self._status, self.message), self.__dict__.copy())

    @classmethod
    def from_error(
        cls,
        error: BaseException,
        status_or_meta: int | HttpErrorStatus | MetaLike | None = None,
        meta: MetaLike | None = None,
    ) -> "HttpError":
        """Convert ``error`` into an :class:`HttpError`.

        An error that already is one is returned untouched, so ``status`` and
        ``meta`` only act as defaults for foreign errors.
        """

        if is_http_error(error):
            return error
        if isinstance(status_or_meta, int) and not isinstance(status_or_meta, bool):
            status = int(status_or_meta)
        elif status_or_meta is None:
            status = DEFAULT_STATUS
        elif isinstance(status_or_meta, (ErrorMeta, Mapping)):
            status = DEFAULT_STATUS
            meta = status_or_meta
        else:
            raise TypeError(f"Expected a status code or metadata, got {type(status_or_meta).__name__}")
        coerced = cls(status, str(error), meta)
        coerced.stack = _describe_trace(error)
        coerced.__traceback__ = error.__traceback__
        logger.debug("Coerced %s into HTTP %s", type(error).__name__, status)
        return coerced

    @classmethod
    def with_status(
        cls,
        status: int | HttpErrorStatus,
        message: str = "",
        meta: MetaLike | None = None,
    ) -> "HttpError":
        """Create an error for any status code, labelling unregistered ones ``Http<code>Error``."""

        if is_error_status(status):
            return cls(status, message, meta)
        return UnregisteredStatusError(status, message, meta)

    def to_json(self) -> dict[str, Any]:
        """Return the wire record for this error, without headers or trace."""

        record = HttpErrorJSON(
            tag=HTTP_ERROR_TAG,
            name=self.name,
            status=self._status,
            subcode=UNSET if self._subcode is None else self._subcode,
            log_level=self._log_level,
            obstructions=list(self.obstructions),
            message=self.message,
        )
        return to_builtins(record)

    def to_response_body(self) -> bytes:
        return json_encode(self.to_json())

    @classmethod
    def from_json(
        cls,
        payload: str | bytes | Mapping[str, Any] | HttpErrorJSON,
        *,
        data_types: DataTypes | None = None,
    ) -> "HttpError":
        """Rebuild an error from its wire record or the JSON text of one.

        The result has no headers and its ``stack`` is captured here, not on
        the side that produced the record.
        """

        if isinstance(payload, HttpErrorJSON):
            record = payload
        elif isinstance(payload, (str, bytes, bytearray)):
            record = json_decode(payload, HttpErrorJSON)
        else:
            source = dict(payload) if isinstance(payload, Mapping) else payload
            record = msgspec.convert(source, type=HttpErrorJSON)
        log_level = record.log_level
        if log_level not in LOG_LEVELS:
            logger.debug("Unknown log level %r in HttpError record, using %r", log_level, DEFAULT_LOG_LEVEL)
            log_level = DEFAULT_LOG_LEVEL
        meta = ErrorMeta(
            subcode=None if record.subcode is UNSET else record.subcode,
            log_level=log_level,
            obstructions=tuple(coerce_obstruction(item, data_types) for item in record.obstructions),
        )
        return cls.with_status(record.status, record.message, meta)


class UnregisteredStatusError(HttpError):
    """An :class:`HttpError` for a status code outside the registry."""

    @classmethod
    def _check_status(cls, status: int | HttpErrorStatus) -> int:
        return ensure_status(status)


def is_http_error(value: object) -> TypeGuard[HttpError]:
    """Return ``True`` if ``value`` carries the :class:`HttpError` tag."""

    if value is None or isinstance(value, type):
        return False
    try:
        return bool(getattr(value, "tag", None) == HTTP_ERROR_TAG)
    except Exception:  # foreign objects may raise from attribute access or comparison
        return False


__all__ = [
    "DEFAULT_STATUS",
    "HTTP_ERROR_TAG",
    "ErrorMeta",
    "HttpError",
    "HttpErrorJSON",
    "Obstruction",
    "UnregisteredStatusError",
    "coerce_meta",
    "coerce_obstruction",
    "is_http_error",
]
