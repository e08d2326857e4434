"""Supported crypto assets.

The table is built once at import time and never mutated; every lookup returns the
same frozen ``CryptoAsset`` instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

QUOTE_CURRENCY = "JPY"


@dataclass(frozen=True)
class CryptoAsset:
    id: str
    name: str
    symbol: str
    icon: str
    icon_color: str
    min_order_size: Decimal

    @property
    def pair(self) -> str:
        return f"{self.symbol}/{QUOTE_CURRENCY}"

    @property
    def product_code(self) -> str:
        return f"{self.symbol}_{QUOTE_CURRENCY}"


CRYPTO_ASSETS: tuple[CryptoAsset, ...] = (
    CryptoAsset(
        id="bitcoin",
        name="Bitcoin",
        symbol="BTC",
        icon="₿",
        icon_color="#f7931a",
        min_order_size=Decimal("0.001"),
    ),
    CryptoAsset(
        id="ethereum",
        name="Ethereum",
        symbol="ETH",
        icon="Ξ",
        icon_color="#627eea",
        min_order_size=Decimal("0.01"),
    ),
)

_BY_ID: Mapping[str, CryptoAsset] = MappingProxyType({asset.id: asset for asset in CRYPTO_ASSETS})
_BY_SYMBOL: Mapping[str, CryptoAsset] = MappingProxyType({asset.symbol: asset for asset in CRYPTO_ASSETS})
_BY_PAIR: Mapping[str, CryptoAsset] = MappingProxyType({asset.pair: asset for asset in CRYPTO_ASSETS})
_BY_PRODUCT_CODE: Mapping[str, CryptoAsset] = MappingProxyType({asset.product_code: asset for asset in CRYPTO_ASSETS})


def find_by_id(asset_id: str) -> CryptoAsset | None:
    return _BY_ID.get(asset_id)


def find_by_symbol(symbol: str) -> CryptoAsset | None:
    return _BY_SYMBOL.get(symbol)


def find_by_pair(pair: str) -> CryptoAsset | None:
    return _BY_PAIR.get(pair)


def find_by_product_code(product_code: str) -> CryptoAsset | None:
    return _BY_PRODUCT_CODE.get(product_code)


def classify_product_code(product_code: str) -> CryptoAsset | None:
    """Match a product code to an asset by symbol substring ("BTC_JPY", "FX_BTC_JPY" -> bitcoin)."""
    exact = find_by_product_code(product_code)
    if exact is not None:
        return exact
    for asset in CRYPTO_ASSETS:
        if asset.symbol in product_code:
            return asset
    return None


def supported_symbols() -> tuple[str, ...]:
    return tuple(asset.symbol for asset in CRYPTO_ASSETS)
