from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

from ods.models import DailyAveragePrice

from .catalog import CRYPTO_ASSETS, CryptoAsset, find_by_id
from .errors import MktCryptoNotFoundError

DEFAULT_PERIOD = "7d"
PERIOD_DAYS: dict[str, int] = {
    "24h": 1,
    "7d": 7,
    "30d": 30,
    "1y": 365,
    "all": 3650,
}
MARKET_CHART_DAYS = 7
_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def period_to_days(period: str) -> int:
    return PERIOD_DAYS.get(period, PERIOD_DAYS[DEFAULT_PERIOD])


def calc_change_percent(chart: list[DailyAveragePrice], current_price: Decimal) -> Decimal:
    if not chart:
        return Decimal("0")
    first_price = chart[0].price
    if first_price == 0:
        return Decimal("0")
    return (current_price - first_price) / first_price * Decimal("100")


def chart_to_payload(chart: list[DailyAveragePrice]) -> list[dict[str, Any]]:
    return [{"day": _DAY_NAMES[point.day.weekday()], "price": float(point.price)} for point in chart]


class MktService:
    def __init__(
        self,
        ods_repository,
        exchange_gateway,
        *,
        now_fn: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.ods_repository = ods_repository
        self.exchange_gateway = exchange_gateway
        self._now_fn = now_fn
        self._logger = logging.getLogger("cryptoconnector.mkt")

    def _daily_averages(self, asset: CryptoAsset, days: int) -> list[DailyAveragePrice]:
        since = self._now_fn().astimezone(timezone.utc).date() - timedelta(days=days)
        return self.ods_repository.list_daily_average_prices(asset.product_code, since)

    def _build_crypto_data(self, asset: CryptoAsset) -> dict[str, Any]:
        ticker = self.exchange_gateway.fetch_ticker(asset.product_code)
        chart = self._daily_averages(asset, MARKET_CHART_DAYS)
        return {
            "id": asset.id,
            "name": asset.name,
            "symbol": asset.symbol,
            "pair": asset.pair,
            "icon": asset.icon,
            "iconColor": asset.icon_color,
            "currentPrice": float(ticker.ltp),
            "changePercent": float(calc_change_percent(chart, ticker.ltp)),
            "chartData": chart_to_payload(chart),
        }

    def _require_asset(self, crypto_id: str) -> CryptoAsset:
        asset = find_by_id(crypto_id)
        if asset is None:
            raise MktCryptoNotFoundError(crypto_id)
        return asset

    def get_market_data(self) -> dict[str, Any]:
        data = [self._build_crypto_data(asset) for asset in CRYPTO_ASSETS]
        return {"data": data, "timestamp": int(self._now_fn().timestamp())}

    def get_crypto(self, crypto_id: str) -> dict[str, Any]:
        return self._build_crypto_data(self._require_asset(crypto_id))

    def get_chart(self, crypto_id: str, period: str | None) -> dict[str, Any]:
        asset = self._require_asset(crypto_id)
        resolved_period = period or DEFAULT_PERIOD
        if resolved_period not in PERIOD_DAYS:
            self._logger.info("Unknown chart period, using default: period=%s default=%s", resolved_period, DEFAULT_PERIOD)
        chart = self._daily_averages(asset, period_to_days(resolved_period))
        return {"data": chart_to_payload(chart), "period": resolved_period}
