from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from bfx.api_client import MockBfxApiClient
from bfx.gateway import DefaultBfxGateway
from mkt.catalog import CRYPTO_ASSETS, find_by_id, find_by_pair, find_by_symbol
from mkt.errors import MktCryptoNotFoundError
from mkt.service import MktService, calc_change_percent, period_to_days
from ods.bootstrap import run_migrations
from ods.models import DailyAveragePrice, PriceHistory
from ods.repository import OdsRepository

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def create_service() -> tuple[MktService, OdsRepository]:
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    run_migrations(conn)
    repo = OdsRepository(conn=conn)
    for recorded_at, price in [
        (datetime(2026, 2, 20, 9, tzinfo=timezone.utc), "5000000"),
        (datetime(2026, 3, 4, 0, tzinfo=timezone.utc), "9000000"),
        (datetime(2026, 3, 4, 12, tzinfo=timezone.utc), "11000000"),
        (datetime(2026, 3, 9, 8, tzinfo=timezone.utc), "10500000"),
    ]:
        repo.append_price_history(PriceHistory(recorded_at=recorded_at, product_code="BTC_JPY", price=Decimal(price)))

    gateway = DefaultBfxGateway(MockBfxApiClient(ltp_by_product={"BTC_JPY": 11_000_000.0, "ETH_JPY": 500_000.0}))
    return MktService(repo, gateway, now_fn=lambda: NOW), repo


def test_catalog_lookups_share_one_table() -> None:
    bitcoin = find_by_id("bitcoin")

    assert bitcoin is not None
    assert bitcoin.symbol == "BTC"
    assert bitcoin.pair == "BTC/JPY"
    assert bitcoin.product_code == "BTC_JPY"
    assert bitcoin.min_order_size == Decimal("0.001")
    assert find_by_symbol("ETH") is find_by_pair("ETH/JPY")
    assert find_by_id("dogecoin") is None
    assert [asset.id for asset in CRYPTO_ASSETS] == ["bitcoin", "ethereum"]


def test_catalog_entries_are_immutable() -> None:
    with pytest.raises(AttributeError):
        CRYPTO_ASSETS[0].symbol = "XRP"  # type: ignore[misc]


def test_period_to_days_defaults_to_week() -> None:
    assert period_to_days("24h") == 1
    assert period_to_days("30d") == 30
    assert period_to_days("1y") == 365
    assert period_to_days("all") == 3650
    assert period_to_days("5y") == 7


def test_change_percent_against_first_point() -> None:
    chart = [DailyAveragePrice(day=NOW.date(), price=Decimal("200"))]

    assert calc_change_percent(chart, Decimal("210")) == Decimal("5")
    assert calc_change_percent([], Decimal("210")) == Decimal("0")
    assert calc_change_percent([DailyAveragePrice(day=NOW.date(), price=Decimal("0"))], Decimal("1")) == Decimal("0")


def test_get_crypto_combines_ticker_and_week_chart() -> None:
    service, repo = create_service()
    try:
        data = service.get_crypto("bitcoin")

        assert data["id"] == "bitcoin"
        assert data["pair"] == "BTC/JPY"
        assert data["iconColor"] == "#f7931a"
        assert data["currentPrice"] == 11_000_000.0
        assert data["chartData"] == [{"day": "Wed", "price": 10_000_000.0}, {"day": "Mon", "price": 10_500_000.0}]
        assert data["changePercent"] == 10.0
    finally:
        repo.close()


def test_get_market_data_lists_every_asset() -> None:
    service, repo = create_service()
    try:
        market = service.get_market_data()

        assert [item["id"] for item in market["data"]] == ["bitcoin", "ethereum"]
        assert market["data"][1]["chartData"] == []
        assert market["data"][1]["changePercent"] == 0.0
        assert market["timestamp"] == int(NOW.timestamp())
    finally:
        repo.close()


def test_get_chart_periods() -> None:
    service, repo = create_service()
    try:
        default = service.get_chart("bitcoin", None)
        month = service.get_chart("bitcoin", "30d")

        assert default["period"] == "7d"
        assert len(default["data"]) == 2
        assert month["period"] == "30d"
        assert [point["day"] for point in month["data"]] == ["Fri", "Wed", "Mon"]
    finally:
        repo.close()


def test_unknown_crypto_is_not_found() -> None:
    service, repo = create_service()
    try:
        with pytest.raises(MktCryptoNotFoundError) as exc_info:
            service.get_crypto("dogecoin")
        assert exc_info.value.code == "NOT_FOUND"

        with pytest.raises(MktCryptoNotFoundError):
            service.get_chart("dogecoin", "7d")
    finally:
        repo.close()
