from __future__ import annotations

from typing import Any


class BfxError(RuntimeError):
    """Failure talking to the bitFlyer API.

    Subclasses fix ``code`` and ``retryable``; read calls retry only retryable errors.
    ``http_status`` and ``body`` are kept when the exchange answered with an error status.
    """

    code = "BFX_UNKNOWN"
    retryable = False

    def __init__(self, message: str, *, http_status: int | None = None, body: Any = None) -> None:
        super().__init__(f"{self.code}: {message}")
        self.message = message
        self.http_status = http_status
        self.body = body


class BfxBadRequestError(BfxError):
    code = "BFX_BAD_REQUEST"


class BfxAuthFailedError(BfxError):
    code = "BFX_AUTH_FAILED"


class BfxAuthMissingError(BfxError):
    code = "BFX_AUTH_MISSING"


class BfxRateLimitedError(BfxError):
    code = "BFX_RATE_LIMITED"
    retryable = True


class BfxUpstreamUnavailableError(BfxError):
    code = "BFX_UPSTREAM_UNAVAILABLE"
    retryable = True


class BfxTimeoutError(BfxError):
    code = "BFX_API_TIMEOUT"
    retryable = True


class BfxResponseInvalidError(BfxError):
    code = "BFX_RESPONSE_INVALID"


class BfxBalanceNotFoundError(BfxError):
    code = "BFX_BALANCE_NOT_FOUND"

    def __init__(self, currency_code: str) -> None:
        super().__init__(f"{currency_code} balance not found")
        self.currency_code = currency_code
