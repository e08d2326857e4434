from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from .api_client import MockBfxApiClient
from .contracts import BfxApiClient, OrderAcceptance, SendChildOrderRequest, Ticker
from .error_mapper import map_exception
from .errors import BfxBalanceNotFoundError

_LOGGER = logging.getLogger("cryptoconnector.bfx.gateway")


def _to_decimal(value: Any, *, field: str) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise map_exception(ValueError(f"{field} is not numeric: {value!r}")) from exc


def _parse_dt(value: Any) -> datetime:
    if isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return datetime.now(timezone.utc)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


class DefaultBfxGateway:
    def __init__(self, api_client: BfxApiClient | None = None) -> None:
        self._api_client = api_client or MockBfxApiClient()

    def fetch_ticker(self, product_code: str) -> Ticker:
        raw = self._api_client.get_ticker_raw(product_code)
        if "ltp" not in raw:
            raise map_exception(ValueError(f"ticker for {product_code} has no ltp"))
        return Ticker(
            product_code=str(raw.get("product_code") or product_code),
            ltp=_to_decimal(raw.get("ltp"), field="ltp"),
            best_bid=_to_decimal(raw.get("best_bid"), field="best_bid"),
            best_ask=_to_decimal(raw.get("best_ask"), field="best_ask"),
            volume=_to_decimal(raw.get("volume"), field="volume"),
            as_of=_parse_dt(raw.get("timestamp")),
        )

    def fetch_available_balance(self, currency_code: str = "JPY") -> Decimal:
        for entry in self._api_client.get_balance_raw():
            if isinstance(entry, dict) and entry.get("currency_code") == currency_code:
                return _to_decimal(entry.get("available"), field="available")
        raise BfxBalanceNotFoundError(currency_code)

    def send_limit_buy_order(self, product_code: str, price: Decimal, size: Decimal) -> OrderAcceptance:
        request = SendChildOrderRequest(product_code=product_code, price=price, size=size)
        _LOGGER.info(
            "Sending limit buy order: product_code=%s price=%s size=%s",
            product_code,
            format(price, "f"),
            format(size, "f"),
        )
        raw = self._api_client.send_child_order_raw(request.to_payload())
        acceptance_id = str(raw.get("child_order_acceptance_id") or "").strip()
        if not acceptance_id:
            raise map_exception(ValueError("order response has no child_order_acceptance_id"))
        return OrderAcceptance(child_order_acceptance_id=acceptance_id)
