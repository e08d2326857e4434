from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

Side = Literal["BUY", "SELL"]

ORDER_STATUS_ACTIVE = "ACTIVE"
ORDER_STATUS_FILLED = "FILLED"
ORDER_STATUS_CANCELED = "CANCELED"


@dataclass(frozen=True)
class BuyOrder:
    order_id: str
    product_code: str
    price: Decimal
    size: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    exchange: str = "bitflyer"
    side: Side = "BUY"
    remarks: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class SellOrder:
    order_id: str
    parent_order_id: str
    product_code: str
    price: Decimal
    size: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    exchange: str = "bitflyer"
    side: Side = "SELL"
    remarks: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class PriceHistory:
    recorded_at: datetime
    product_code: str
    price: Decimal
    price_ratio_24h: Decimal | None = None


@dataclass(frozen=True)
class DailyAveragePrice:
    day: date
    price: Decimal
