from __future__ import annotations

from decimal import Decimal, InvalidOperation

from mkt.catalog import CryptoAsset, find_by_pair

from .errors import (
    OpsInvalidAmountError,
    OpsInvalidPriceError,
    OpsInvalidRequestError,
    OpsUnsupportedPairError,
)

ORDER_TYPE_LIMIT = "limit"
SUPPORTED_ORDER_TYPES = (ORDER_TYPE_LIMIT,)


def _to_decimal(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def validate_price(value: object) -> Decimal:
    price = _to_decimal(value)
    if price is None or price <= 0:
        raise OpsInvalidPriceError(value)
    return price


def validate_pair(value: object) -> CryptoAsset:
    asset = find_by_pair(str(value or ""))
    if asset is None:
        raise OpsUnsupportedPairError(value)
    return asset


def validate_amount(value: object) -> Decimal:
    amount = _to_decimal(value)
    if amount is None or amount <= 0:
        raise OpsInvalidAmountError(value)
    return amount


def validate_minimum_amount(amount: Decimal, asset: CryptoAsset) -> Decimal:
    if amount < asset.min_order_size:
        raise OpsInvalidAmountError(
            amount,
            f"minimum order amount for {asset.symbol} is {format(asset.min_order_size, 'f')}",
        )
    return amount


def validate_order_type(value: object) -> str:
    order_type = str(value or "")
    if order_type not in SUPPORTED_ORDER_TYPES:
        raise OpsInvalidRequestError(
            "orderType",
            value,
            f"unsupported order type: {value}. Only {ORDER_TYPE_LIMIT} orders are supported",
        )
    return order_type
