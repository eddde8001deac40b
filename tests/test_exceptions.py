from __future__ import annotations

import pickle

import msgspec
import pytest

from http_errors.exceptions import (
    HTTP_ERROR_TAG,
    ErrorMeta,
    HttpError,
    Obstruction,
    UnregisteredStatusError,
    coerce_meta,
    coerce_obstruction,
    is_http_error,
)
from http_errors.http import HTTP_ERROR_STATUSES, HttpErrorStatus


class CashShortfall(msgspec.Struct):
    required: int
    on_hand: int


def test_name_follows_status_for_every_registered_code() -> None:
    for status, phrase in HTTP_ERROR_STATUSES.items():
        error = HttpError(status, "boom")
        assert error.status == status
        assert error.name == phrase


def test_name_cannot_be_overridden() -> None:
    error = HttpError(404, "missing", {"name": "Nope", "tag": "Other"})
    assert error.name == "Not Found"
    assert error.tag == HTTP_ERROR_TAG
    with pytest.raises(AttributeError):
        error.name = "Lost"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        error.tag = "Other"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        error.status = 500  # type: ignore[misc]


def test_defaults() -> None:
    error = HttpError(HttpErrorStatus.BAD_REQUEST, "")
    assert error.message == ""
    assert error.subcode is None
    assert error.log_level == "error"
    assert error.obstructions == []
    assert error.headers == {}
    assert error.code == "HTTP_BAD_REQUEST"
    assert isinstance(error.status, int)
    assert error.stack


def test_defaults_are_not_shared() -> None:
    first = HttpError(400, "a")
    second = HttpError(400, "b")
    first.obstructions.append(Obstruction("A", "t"))
    first.headers["x"] = "1"
    assert second.obstructions == []
    assert second.headers == {}


def test_unregistered_status_is_rejected() -> None:
    with pytest.raises(ValueError):
        HttpError(419, "nope")
    with pytest.raises(ValueError):
        HttpError(200, "ok")


def test_meta_options_are_applied() -> None:
    meta = ErrorMeta(
        subcode="LOGIN_FAILED",
        log_level="warning",
        obstructions=(Obstruction("BadPassword", "Password is wrong"),),
        headers={"WWW-Authenticate": "Bearer"},
    )
    error = HttpError(401, "Login failed", meta)
    assert error.subcode == "LOGIN_FAILED"
    assert error.log_level == "warning"
    assert error.obstructions == [Obstruction("BadPassword", "Password is wrong")]
    assert error.headers == {"WWW-Authenticate": "Bearer"}
    assert str(error) == "Login failed"


def test_mapping_meta_accepts_camel_case_log_level() -> None:
    error = HttpError(429, "slow down", {"logLevel": "notice", "obstructions": [{"code": "Rate", "text": "t"}]})
    assert error.log_level == "notice"
    assert error.obstructions[0] == Obstruction("Rate", "t")


def test_invalid_log_level() -> None:
    with pytest.raises(ValueError):
        HttpError(500, "x", {"log_level": "loud"})
    error = HttpError(500, "x")
    error.log_level = "critical"
    assert error.log_level == "critical"
    with pytest.raises(ValueError):
        error.log_level = "loud"  # type: ignore[assignment]


def test_obstructions_are_mutable_in_place() -> None:
    error = HttpError(500, "Test error!", {"subcode": "test"})
    error.obstructions.append(Obstruction("SomeObstruction", "There's something wrong with this thing."))
    assert len(error.obstructions) == 1
    assert error.obstructions[0].code == "SomeObstruction"

    error.obstructions = [Obstruction("SomeObstruction", "Wrong."), Obstruction("SomethingElse", "Other.")]
    assert len(error.obstructions) == 2
    assert error.obstructions[1].code == "SomethingElse"


def test_coerce_obstruction_validates_mapping() -> None:
    with pytest.raises(ValueError):
        coerce_obstruction({"code": "A"})
    with pytest.raises(TypeError):
        coerce_obstruction("A")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        coerce_obstruction({"code": 7, "text": "t"})
    with pytest.raises(ValueError):
        coerce_obstruction(Obstruction(7, "t"))  # type: ignore[arg-type]


def test_ill_typed_meta_is_rejected() -> None:
    with pytest.raises(ValueError):
        HttpError(400, "x", {"subcode": 5})
    with pytest.raises(ValueError):
        HttpError(400, "x", {"obstructions": [{"code": 7, "text": "t"}]})
    with pytest.raises(ValueError):
        HttpError(400, "x", {"obstructions": [{"code": "A", "text": None}]})
    with pytest.raises(ValueError):
        HttpError(400, "x", {"headers": {"X-Retry": 5}})
    with pytest.raises(ValueError):
        HttpError(400, "x", ErrorMeta(subcode=5))  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        HttpError(400, 5)  # type: ignore[arg-type]


def test_validated_meta_round_trips() -> None:
    error = HttpError(400, "x", {"subcode": "S", "obstructions": [{"code": "A", "text": "t", "data": {"n": 1}}]})
    restored = HttpError.from_json(error.to_json())
    assert restored.subcode == "S"
    assert restored.obstructions == [Obstruction("A", "t", {"n": 1})]


def test_camel_case_log_level_used_when_snake_case_is_none() -> None:
    assert coerce_meta({"log_level": None, "logLevel": "debug"}).log_level == "debug"
    assert coerce_meta({"log_level": "info", "logLevel": "debug"}).log_level == "info"


def test_coerce_obstruction_converts_data_by_code() -> None:
    data_types = {"CashShortfall": CashShortfall}
    raw = {"code": "CashShortfall", "text": "Not enough", "data": {"required": 10, "on_hand": 1}}
    obstruction = coerce_obstruction(raw, data_types)
    assert obstruction.data == CashShortfall(required=10, on_hand=1)

    untouched = coerce_obstruction({"code": "Other", "text": "t", "data": {"x": 1}}, data_types)
    assert untouched.data == {"x": 1}

    with pytest.raises(msgspec.ValidationError):
        coerce_obstruction({"code": "CashShortfall", "text": "t", "data": {"required": "ten"}}, data_types)


def test_coerce_meta_rejects_other_types() -> None:
    assert coerce_meta(None) == ErrorMeta()
    with pytest.raises(TypeError):
        coerce_meta(["subcode"])  # type: ignore[arg-type]


def test_is_http_error() -> None:
    assert is_http_error(HttpError(500, "x"))
    assert not is_http_error(None)
    assert not is_http_error(42)
    assert not is_http_error("HttpError")
    assert not is_http_error({})
    assert not is_http_error({"tag": "HttpError"})
    assert not is_http_error(ValueError("plain"))
    assert not is_http_error(HttpError)


def test_is_http_error_recognizes_foreign_tagged_objects() -> None:
    class ForeignHttpError(Exception):
        tag = "HttpError"
        status = 404

    assert is_http_error(ForeignHttpError())


def test_is_http_error_never_raises() -> None:
    class Hostile:
        @property
        def tag(self) -> str:
            raise RuntimeError("no")

    assert not is_http_error(Hostile())


def test_from_error_returns_existing_http_error_unchanged() -> None:
    original = HttpError(404, "missing", {"subcode": "orig"})
    result = HttpError.from_error(original, 415, {"subcode": "x"})
    assert result is original
    assert result.status == 404
    assert result.subcode == "orig"
    assert HttpError.from_error(original, {"log_level": "debug"}) is original
    assert original.log_level == "error"


def test_from_error_defaults_to_internal_server_error() -> None:
    error = HttpError.from_error(ValueError("Test error"))
    assert error.status == 500
    assert error.name == "Internal Server Error"
    assert error.message == "Test error"


def test_from_error_with_status() -> None:
    error = HttpError.from_error(RuntimeError("upstream"), 502)
    assert error.status == 502
    assert error.name == "Bad Gateway"


def test_from_error_call_shapes() -> None:
    with_status = HttpError.from_error(RuntimeError("x"), 503, {"subcode": "DB_DOWN", "log_level": "alert"})
    assert (with_status.status, with_status.subcode, with_status.log_level) == (503, "DB_DOWN", "alert")

    meta_only = HttpError.from_error(RuntimeError("x"), ErrorMeta(subcode="META"))
    assert (meta_only.status, meta_only.subcode) == (500, "META")

    with pytest.raises(TypeError):
        HttpError.from_error(RuntimeError("x"), "404")  # type: ignore[arg-type]


def test_from_error_keeps_original_trace() -> None:
    try:
        raise KeyError("lookup failed")
    except KeyError as exc:
        caught = exc
    error = HttpError.from_error(caught)
    assert error.__traceback__ is caught.__traceback__
    assert "lookup failed" in error.stack
    assert "test_from_error_keeps_original_trace" in error.stack


def test_from_error_in_handler() -> None:
    for raised in (HttpError(500, "Test error"), Exception("Test error")):
        try:
            raise raised
        except Exception as exc:
            error = exc if is_http_error(exc) else HttpError.from_error(exc)
        assert error.name == "Internal Server Error"
        assert error.status == 500


def test_with_status_registered_and_fallback() -> None:
    registered = HttpError.with_status(404, "missing")
    assert type(registered) is HttpError
    assert registered.name == "Not Found"

    custom = HttpError.with_status(419, "expired", {"subcode": "PAGE"})
    assert isinstance(custom, UnregisteredStatusError)
    assert is_http_error(custom)
    assert custom.status == 419
    assert custom.name == "Http419Error"
    assert custom.code == "HTTP_419_ERROR"
    assert custom.subcode == "PAGE"

    with pytest.raises(ValueError):
        HttpError.with_status(700, "nope")


def test_pickle_preserves_state() -> None:
    error = HttpError(403, "denied", {"subcode": "S", "headers": {"X-H": "1"}})
    error.obstructions.append(Obstruction("A", "t"))
    restored = pickle.loads(pickle.dumps(error))
    assert restored.status == 403
    assert restored.message == "denied"
    assert restored.subcode == "S"
    assert restored.headers == {"X-H": "1"}
    assert restored.obstructions == [Obstruction("A", "t")]
