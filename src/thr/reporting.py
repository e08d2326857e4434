"""Profit arithmetic for matched trades.

Profit per trade is ``(sell_price * size - buy_price * size) * FEE_FACTOR`` rounded to one
decimal place, ties away from zero. Statistics sum the already rounded per-trade profits
so that a listing and its statistics always agree to the last digit.

``profit_percentage`` is a heuristic: average profit per trade relative to a fixed
``REFERENCE_TRADE_NOTIONAL``. It is not a return on invested capital.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from .models import Pagination, Period, TradeStatistics

# ~0.11 % round-trip exchange fee
FEE_FACTOR = Decimal("0.9989")
PROFIT_Q = Decimal("0.1")
REFERENCE_TRADE_NOTIONAL = Decimal("100000")
ZERO = Decimal("0.0")


def q_profit(value: Decimal) -> Decimal:
    return value.quantize(PROFIT_Q, rounding=ROUND_HALF_UP)


def calc_trade_profit(sell_price: Decimal, buy_price: Decimal, size: Decimal) -> Decimal:
    gross = sell_price * size - buy_price * size
    return q_profit(gross * FEE_FACTOR)


def calc_profit_percentage(total_profit: Decimal, execution_count: int) -> Decimal:
    if execution_count <= 0 or total_profit == 0:
        return ZERO
    average = total_profit / Decimal(execution_count)
    return q_profit(average / REFERENCE_TRADE_NOTIONAL * Decimal("100"))


def aggregate_statistics(trade_profits: Iterable[Decimal], period: Period) -> TradeStatistics:
    execution_count = 0
    total = Decimal("0")
    for profit in trade_profits:
        execution_count += 1
        total += profit

    total_profit = q_profit(total)
    return TradeStatistics(
        total_profit=total_profit,
        profit_percentage=calc_profit_percentage(total_profit, execution_count),
        execution_count=execution_count,
        period=period,
    )


def build_pagination(page: int, limit: int, total_count: int) -> Pagination:
    total_pages = (total_count + limit - 1) // limit if total_count > 0 else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next=page < total_pages,
    )
