from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Protocol

Mode = Literal["mock", "live"]


@dataclass(frozen=True)
class Ticker:
    product_code: str
    ltp: Decimal
    best_bid: Decimal
    best_ask: Decimal
    volume: Decimal
    as_of: datetime


@dataclass(frozen=True)
class SendChildOrderRequest:
    product_code: str
    price: Decimal
    size: Decimal
    side: Literal["BUY", "SELL"] = "BUY"
    child_order_type: Literal["LIMIT", "MARKET"] = "LIMIT"
    time_in_force: Literal["GTC", "IOC", "FOK"] = "GTC"

    def to_payload(self) -> dict[str, Any]:
        return {
            "product_code": self.product_code,
            "child_order_type": self.child_order_type,
            "side": self.side,
            "price": float(self.price),
            "size": float(self.size),
            "time_in_force": self.time_in_force,
        }


@dataclass(frozen=True)
class OrderAcceptance:
    child_order_acceptance_id: str


class BfxApiClient(Protocol):
    def get_ticker_raw(self, product_code: str) -> dict[str, Any]: ...

    def get_balance_raw(self) -> list[dict[str, Any]]: ...

    def send_child_order_raw(self, payload: dict[str, Any]) -> dict[str, Any]: ...


class BfxGateway(Protocol):
    def fetch_ticker(self, product_code: str) -> Ticker: ...

    def fetch_available_balance(self, currency_code: str = "JPY") -> Decimal: ...

    def send_limit_buy_order(self, product_code: str, price: Decimal, size: Decimal) -> OrderAcceptance: ...
