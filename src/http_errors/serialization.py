from __future__ import annotations

from typing import Any, Protocol, TypeVar, cast, overload

import msgspec

T = TypeVar("T")


class _JSONModule(Protocol):
    def encode(self, obj: Any, *, enc_hook: Any = None) -> bytes: ...

    def decode(self, data: bytes | str, *, type: Any = Any) -> Any: ...


_json = cast(_JSONModule, getattr(msgspec, "json"))


def _enc_hook(value: Any) -> Any:
    from .exceptions import is_http_error

    if is_http_error(value):
        return value.to_json()
    raise NotImplementedError(f"Objects of type {type(value).__name__} are not JSON serializable")


def to_builtins(value: Any) -> Any:
    """Convert ``value`` into plain dicts, lists and scalars.

    :class:`~http_errors.exceptions.HttpError` values anywhere in ``value`` are
    replaced by their wire record.
    """

    return msgspec.to_builtins(value, enc_hook=_enc_hook)


def json_encode(value: Any) -> bytes:
    """Serialize ``value`` to JSON bytes using msgspec."""

    return _json.encode(value, enc_hook=_enc_hook)


@overload
def json_decode(data: bytes | str) -> Any: ...


@overload
def json_decode(data: bytes | str, type: type[T]) -> T: ...


def json_decode(data: bytes | str, type: Any = Any) -> Any:
    """Deserialize JSON ``data``, validating against ``type`` when given."""

    return _json.decode(data, type=type)


__all__ = ["json_decode", "json_encode", "to_builtins"]
