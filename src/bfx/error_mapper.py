from __future__ import annotations

import json
from socket import timeout as socket_timeout
from typing import Any
from urllib.error import URLError

from .errors import (
    BfxAuthFailedError,
    BfxBadRequestError,
    BfxError,
    BfxRateLimitedError,
    BfxResponseInvalidError,
    BfxTimeoutError,
    BfxUpstreamUnavailableError,
)

_STATUS_ERRORS: dict[int, tuple[type[BfxError], str]] = {
    400: (BfxBadRequestError, "exchange rejected the request parameters"),
    401: (BfxAuthFailedError, "exchange rejected the API credentials"),
    403: (BfxAuthFailedError, "exchange rejected the API credentials"),
    429: (BfxRateLimitedError, "exchange rate limit exceeded"),
}


def map_http_status(status_code: int, body: Any = None) -> BfxError:
    if status_code in _STATUS_ERRORS:
        error_cls, message = _STATUS_ERRORS[status_code]
        return error_cls(message, http_status=status_code, body=body)
    if 500 <= status_code <= 599:
        return BfxUpstreamUnavailableError(
            "exchange API is temporarily unavailable", http_status=status_code, body=body
        )
    return BfxError(f"exchange API returned status {status_code}", http_status=status_code, body=body)


def map_exception(exc: Exception) -> BfxError:
    if isinstance(exc, BfxError):
        return exc
    if isinstance(exc, (TimeoutError, socket_timeout, URLError)):
        return BfxTimeoutError(f"exchange API did not respond in time: {exc}")
    if isinstance(exc, (ValueError, json.JSONDecodeError)):
        return BfxResponseInvalidError(f"exchange API response could not be decoded: {exc}")
    return BfxError(f"unexpected exchange client failure: {exc}")
