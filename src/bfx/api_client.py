from __future__ import annotations

import hashlib
import hmac
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .error_mapper import map_exception, map_http_status
from .errors import BfxAuthMissingError, BfxError
from .retry import execute_with_retry

DEFAULT_BASE_URL = "https://api.bitflyer.com"

TransportFn = Callable[
    [str, str, dict[str, str], str | None, float],
    tuple[int, Any],
]


def _decode_body(raw: str) -> Any:
    if not raw.strip():
        return {}
    return json.loads(raw)


def urllib_transport(
    method: str,
    url: str,
    headers: dict[str, str],
    body: str | None,
    timeout_seconds: float,
) -> tuple[int, Any]:
    encoded_body = body.encode("utf-8") if body is not None else None
    request = Request(url=url, data=encoded_body, method=method)
    for key, value in headers.items():
        request.add_header(key, value)

    try:
        with urlopen(request, timeout=timeout_seconds) as response:
            return int(response.getcode()), _decode_body(response.read().decode("utf-8"))
    except HTTPError as exc:
        raw = exc.read().decode("utf-8", errors="replace")
        try:
            return int(exc.code), _decode_body(raw)
        except ValueError:
            return int(exc.code), {"raw": raw}


def sign_request(secret: str, timestamp: str, method: str, path: str, body: str) -> str:
    text = f"{timestamp}{method}{path}{body}"
    return hmac.new(secret.encode("utf-8"), text.encode("utf-8"), hashlib.sha256).hexdigest()


class MockBfxApiClient:
    def __init__(
        self,
        *,
        ltp_by_product: dict[str, float] | None = None,
        jpy_available: float = 1_000_000.0,
        acceptance_id: str = "JRF20260101-000000-000001",
    ) -> None:
        self._ltp_by_product = ltp_by_product or {"BTC_JPY": 10_000_000.0, "ETH_JPY": 500_000.0}
        self._jpy_available = jpy_available
        self._acceptance_id = acceptance_id
        self.sent_orders: list[dict[str, Any]] = []

    def get_ticker_raw(self, product_code: str) -> dict[str, Any]:
        ltp = self._ltp_by_product.get(product_code, 10_000_000.0)
        return {
            "product_code": product_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tick_id": 1,
            "best_bid": ltp,
            "best_ask": ltp,
            "ltp": ltp,
            "volume": 0.0,
        }

    def get_balance_raw(self) -> list[dict[str, Any]]:
        return [
            {"currency_code": "JPY", "amount": self._jpy_available, "available": self._jpy_available},
            {"currency_code": "BTC", "amount": 0.0, "available": 0.0},
        ]

    def send_child_order_raw(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.sent_orders.append(dict(payload))
        return {"child_order_acceptance_id": self._acceptance_id}


class LiveBfxApiClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        api_secret: str = "",
        transport: TransportFn = urllib_transport,
        timeout_seconds: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay_seconds: float = 0.2,
        retry_max_delay_seconds: float = 2.0,
        sleep_fn: Callable[[float], None] = time.sleep,
        rand_fn: Callable[[float, float], float] | None = None,
        timestamp_fn: Callable[[], str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret
        self._transport = transport
        self._timeout_seconds = timeout_seconds
        self._retry_attempts = retry_attempts
        self._retry_base_delay_seconds = retry_base_delay_seconds
        self._retry_max_delay_seconds = retry_max_delay_seconds
        self._sleep_fn = sleep_fn
        self._rand_fn = rand_fn
        self._timestamp_fn = timestamp_fn or (lambda: str(int(time.time())))

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key and self._api_secret)

    def get_ticker_raw(self, product_code: str) -> dict[str, Any]:
        path = f"/v1/ticker?{urlencode({'product_code': product_code})}"
        response = self._call_with_retry("GET", path, label=f"ticker {product_code}")
        if not isinstance(response, dict):
            raise map_exception(ValueError("ticker response is not an object"))
        return response

    def get_balance_raw(self) -> list[dict[str, Any]]:
        response = self._call_with_retry("GET", "/v1/me/getbalance", private=True, label="balance")
        if not isinstance(response, list):
            raise map_exception(ValueError("balance response is not a list"))
        return response

    def send_child_order_raw(self, payload: dict[str, Any]) -> dict[str, Any]:
        # a lost response may still mean an accepted order, so submission is never retried
        response = self._send("POST", "/v1/me/sendchildorder", body=json.dumps(payload), private=True)
        if not isinstance(response, dict):
            raise map_exception(ValueError("order response is not an object"))
        return response

    def _call_with_retry(self, method: str, path: str, *, private: bool = False, label: str) -> Any:
        kwargs: dict[str, Any] = {}
        if self._rand_fn is not None:
            kwargs["rand_fn"] = self._rand_fn
        return execute_with_retry(
            lambda: self._send(method, path, private=private),
            should_retry=lambda exc: isinstance(exc, BfxError) and exc.retryable,
            attempts=self._retry_attempts,
            base_delay_seconds=self._retry_base_delay_seconds,
            max_delay_seconds=self._retry_max_delay_seconds,
            sleep_fn=self._sleep_fn,
            label=label,
            **kwargs,
        )

    def _send(self, method: str, path: str, *, body: str | None = None, private: bool = False) -> Any:
        headers = {"Content-Type": "application/json"}
        if private:
            if not self.has_credentials:
                raise BfxAuthMissingError("exchange API key and secret are not configured")
            timestamp = self._timestamp_fn()
            headers["ACCESS-KEY"] = self._api_key
            headers["ACCESS-TIMESTAMP"] = timestamp
            headers["ACCESS-SIGN"] = sign_request(self._api_secret, timestamp, method, path, body or "")

        try:
            status, response = self._transport(method, f"{self._base_url}{path}", headers, body, self._timeout_seconds)
        except Exception as exc:
            raise map_exception(exc) from exc

        if status < 200 or status >= 300:
            raise map_http_status(status, response)
        return response
