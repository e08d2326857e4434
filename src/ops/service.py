from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

from mkt.catalog import QUOTE_CURRENCY, CryptoAsset
from ods.errors import OdsStorageError
from ods.models import ORDER_STATUS_ACTIVE, BuyOrder
from ods.repository import OdsRepository

from .errors import OpsInsufficientBalanceError
from .validators import (
    validate_amount,
    validate_minimum_amount,
    validate_order_type,
    validate_pair,
    validate_price,
)

ORDER_STATUS_PENDING = "pending"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CreateOrderCommand:
    pair: str
    order_type: str
    price: object
    amount: object


class OpsService:
    def __init__(
        self,
        exchange_gateway,
        *,
        repository_factory: Callable[[], OdsRepository] | None = None,
        now_fn: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.exchange_gateway = exchange_gateway
        self._repository_factory = repository_factory
        self._now_fn = now_fn
        self._logger = logging.getLogger("cryptoconnector.ops")

    def create_order(self, command: CreateOrderCommand) -> dict[str, Any]:
        price = validate_price(command.price)
        amount = validate_amount(command.amount)
        asset = validate_pair(command.pair)
        validate_minimum_amount(amount, asset)
        order_type = validate_order_type(command.order_type)

        estimated_total = price * amount
        available = self.exchange_gateway.fetch_available_balance(QUOTE_CURRENCY)
        if estimated_total > available:
            self._logger.info(
                "Order rejected for insufficient balance: pair=%s required=%s available=%s",
                asset.pair,
                format(estimated_total, "f"),
                format(available, "f"),
            )
            raise OpsInsufficientBalanceError(estimated_total, available)

        acceptance = self.exchange_gateway.send_limit_buy_order(asset.product_code, price, amount)
        order_id = acceptance.child_order_acceptance_id
        self._record_order(order_id, asset, price, amount)

        return {
            "orderId": order_id,
            "pair": asset.pair,
            "orderType": order_type,
            "price": float(price),
            "amount": float(amount),
            "estimatedTotal": float(estimated_total),
            "status": ORDER_STATUS_PENDING,
        }

    def _record_order(self, order_id: str, asset: CryptoAsset, price: Decimal, amount: Decimal) -> None:
        if self._repository_factory is None:
            return
        now = self._now_fn()
        order = BuyOrder(
            order_id=order_id,
            product_code=asset.product_code,
            price=price,
            size=amount,
            status=ORDER_STATUS_ACTIVE,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._repository_factory() as repository:
                repository.save_buy_order(order)
        except OdsStorageError as exc:
            # the exchange already accepted the order
            self._logger.warning("Failed to record buy order: order_id=%s error=%s", order_id, exc)

    def get_balance(self) -> dict[str, Any]:
        available = self.exchange_gateway.fetch_available_balance(QUOTE_CURRENCY)
        return {
            "availableBalance": float(available),
            "currency": QUOTE_CURRENCY,
            "timestamp": int(self._now_fn().timestamp()),
        }
