from __future__ import annotations

import logging
from typing import Any, cast

from mkt.catalog import classify_product_code

from .models import Cryptocurrency, MatchedTrade, Pagination, TradeStatistics, Transaction, TransactionPage
from .reporting import calc_trade_profit

UNKNOWN_CRYPTOCURRENCY: Cryptocurrency = "unknown"

_LOGGER = logging.getLogger("cryptoconnector.thr.mapper")


def classify_cryptocurrency(product_code: str) -> Cryptocurrency:
    asset = classify_product_code(product_code)
    if asset is None:
        _LOGGER.warning("Unrecognized product code in trade history: product_code=%s", product_code)
        return UNKNOWN_CRYPTOCURRENCY
    return cast(Cryptocurrency, asset.id)


def to_transaction(trade: MatchedTrade) -> Transaction:
    return Transaction(
        id=str(trade.id),
        cryptocurrency=classify_cryptocurrency(trade.product_code),
        product_code=trade.product_code,
        timestamp=trade.closed_at,
        profit=calc_trade_profit(trade.sell_price, trade.buy_price, trade.size),
        order_id=trade.sell_order_id,
        buy_order_id=trade.buy_order_id,
        buy_price=trade.buy_price,
        sell_price=trade.sell_price,
        amount=trade.size,
    )


def transaction_to_payload(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "cryptocurrency": transaction.cryptocurrency,
        "timestamp": transaction.timestamp.isoformat(),
        "profit": float(transaction.profit),
        "orderType": transaction.order_type,
        "orderId": transaction.order_id,
        "buyOrderId": transaction.buy_order_id,
        "buyPrice": float(transaction.buy_price),
        "sellPrice": float(transaction.sell_price),
        "amount": float(transaction.amount),
    }


def pagination_to_payload(pagination: Pagination) -> dict[str, Any]:
    return {
        "currentPage": pagination.current_page,
        "totalPages": pagination.total_pages,
        "totalCount": pagination.total_count,
        "hasNext": pagination.has_next,
    }


def statistics_to_payload(statistics: TradeStatistics) -> dict[str, Any]:
    return {
        "totalProfit": float(statistics.total_profit),
        "profitPercentage": float(statistics.profit_percentage),
        "executionCount": statistics.execution_count,
        "period": statistics.period,
    }


def transaction_page_to_payload(page: TransactionPage) -> dict[str, Any]:
    return {
        "transactions": [transaction_to_payload(transaction) for transaction in page.transactions],
        "pagination": pagination_to_payload(page.pagination),
    }
