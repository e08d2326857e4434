from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal

Period = Literal["all", "7days"]
Cryptocurrency = Literal["bitcoin", "ethereum", "unknown"]


@dataclass(frozen=True)
class MatchedTrade:
    """One filled sell order joined to the buy order it closes."""

    id: int
    sell_order_id: str
    buy_order_id: str
    product_code: str
    sell_price: Decimal
    buy_price: Decimal
    size: Decimal
    closed_at: datetime


@dataclass(frozen=True)
class Transaction:
    id: str
    cryptocurrency: Cryptocurrency
    product_code: str
    timestamp: datetime
    profit: Decimal
    order_id: str
    buy_order_id: str
    buy_price: Decimal
    sell_price: Decimal
    amount: Decimal
    order_type: Literal["sell"] = "sell"


@dataclass(frozen=True)
class TradeStatistics:
    total_profit: Decimal
    profit_percentage: Decimal
    execution_count: int
    period: Period


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool


@dataclass(frozen=True)
class TransactionPage:
    transactions: list[Transaction]
    pagination: Pagination
