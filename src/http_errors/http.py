"""HTTP error status registry and label helpers."""

from __future__ import annotations

import re
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class HttpErrorStatus(IntEnum):
    """Enumeration of every HTTP error status code the registry knows about."""

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417
    IM_A_TEAPOT = 418
    ENHANCE_YOUR_CALM = 420
    UNPROCESSABLE_ENTITY = 422
    LOCKED = 423
    FAILED_DEPENDENCY = 424
    RESERVED_FOR_WEBDAV = 425
    UPGRADE_REQUIRED = 426
    PRECONDITION_REQUIRED = 428
    TOO_MANY_REQUESTS = 429
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431
    NO_RESPONSE = 444
    RETRY_WITH = 449
    BLOCKED_BY_WINDOWS_PARENTAL_CONTROLS = 450
    UNAVAILABLE_FOR_LEGAL_REASONS = 451
    CLIENT_CLOSED_REQUEST = 499
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505
    VARIANT_ALSO_NEGOTIATES = 506
    INSUFFICIENT_STORAGE = 507
    LOOP_DETECTED = 508
    BANDWIDTH_LIMIT_EXCEEDED = 509
    NOT_EXTENDED = 510
    NETWORK_AUTHENTICATION_REQUIRED = 511
    NETWORK_READ_TIMEOUT_ERROR = 598
    NETWORK_CONNECT_TIMEOUT_ERROR = 599


# Phrases are kept verbatim, including the informal entries other systems match on.
HTTP_ERROR_STATUSES: Mapping[int, str] = MappingProxyType(
    {
        400: "Bad Request",
        401: "Unauthorized",
        402: "Payment Required",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        406: "Not Acceptable",
        407: "Proxy Authentication Required",
        408: "Request Timeout",
        409: "Conflict",
        410: "Gone",
        411: "Length Required",
        412: "Precondition Failed",
        413: "Payload Too Large",
        414: "URI Too Long",
        415: "Unsupported Media Type",
        416: "Range Not Satisfiable",
        417: "Expectation Failed",
        418: "I'm a teapot",
        420: "Enhance Your Calm",
        422: "Unprocessable Entity",
        423: "Locked",
        424: "Failed Dependency",
        425: "Reserved for WebDAV",
        426: "Upgrade Required",
        428: "Precondition Required",
        429: "Too Many Requests",
        431: "Request Header Fields Too Large",
        444: "No Response",
        449: "Retry With",
        450: "Blocked by Windows Parental Controls",
        451: "Unavailable For Legal Reasons",
        499: "Client Closed Request",
        500: "Internal Server Error",
        501: "Not Implemented",
        502: "Bad Gateway",
        503: "Service Unavailable",
        504: "Gateway Timeout",
        505: "HTTP Version Not Supported",
        506: "Variant Also Negotiates",
        507: "Insufficient Storage",
        508: "Loop Detected",
        509: "Bandwidth Limit Exceeded",
        510: "Not Extended",
        511: "Network Authentication Required",
        598: "Network read timeout error",
        599: "Network connect timeout error",
    }
)

_NON_WORD = re.compile(r"[^A-Z0-9]+")


def ensure_status(status: int | HttpErrorStatus) -> int:
    """Normalize ``status`` to an ``int`` and ensure it is within the HTTP range."""

    if isinstance(status, bool) or not isinstance(status, int):
        raise ValueError(f"Invalid HTTP status code: {status!r}")
    code = int(status)
    if code < 100 or code > 599:
        raise ValueError(f"Invalid HTTP status code: {status}")
    return code


def is_error_status(status: object) -> bool:
    """Return ``True`` if ``status`` is one of the registered error codes."""

    if isinstance(status, bool) or not isinstance(status, int):
        return False
    return int(status) in HTTP_ERROR_STATUSES


def reason_phrase(status: int | HttpErrorStatus) -> str:
    """Return the canonical reason phrase for a registered ``status``."""

    code = ensure_status(status)
    try:
        return HTTP_ERROR_STATUSES[code]
    except KeyError:
        raise ValueError(f"Unsupported HTTP error status: {code}") from None


def error_name(status: int | HttpErrorStatus) -> str:
    """Return the error name for ``status``, synthesizing one for unregistered codes."""

    code = ensure_status(status)
    phrase = HTTP_ERROR_STATUSES.get(code)
    if phrase is None:
        return f"Http{code}Error"
    return phrase


def error_code(status: int | HttpErrorStatus) -> str:
    """Return the machine-readable code for ``status``.

    Registered codes map to their upper snake case phrase (``HTTP_NOT_FOUND``),
    anything else to ``HTTP_<code>_ERROR``.
    """

    code = ensure_status(status)
    phrase = HTTP_ERROR_STATUSES.get(code)
    if phrase is None:
        return f"HTTP_{code}_ERROR"
    words = _NON_WORD.sub("_", phrase.replace("'", "").upper()).strip("_")
    return f"HTTP_{words}"


__all__ = [
    "HTTP_ERROR_STATUSES",
    "HttpErrorStatus",
    "ensure_status",
    "error_code",
    "error_name",
    "is_error_status",
    "reason_phrase",
]
