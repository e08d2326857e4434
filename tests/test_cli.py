from __future__ import annotations

import json
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
from cag.config import GatewayConfig
from cag.service import GatewayService
from cli import discounted_price, main

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _service(tmp_path: Path, client: MockBfxApiClient) -> GatewayService:
    return GatewayService(
        GatewayConfig(db_path=str(tmp_path / "connector.db")),
        exchange_client=client,
        now_fn=lambda: NOW,
    )


def test_discounted_price_truncates_to_yen() -> None:
    assert discounted_price(Decimal("10000001"), Decimal("0.97")) == Decimal("9700000")
    assert discounted_price(Decimal("512345.6"), Decimal("0.97")) == Decimal("496975")


def test_buy_places_minimum_orders_for_every_asset(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    client = MockBfxApiClient()

    exit_code = main(["buy"], service=_service(tmp_path, client))

    assert exit_code == 0
    assert [(order["product_code"], order["price"], order["size"]) for order in client.sent_orders] == [
        ("BTC_JPY", 9_700_000.0, 0.001),
        ("ETH_JPY", 485_000.0, 0.01),
    ]
    assert '"status": "pending"' in capsys.readouterr().out


def test_buy_single_asset_with_custom_discount(tmp_path: Path) -> None:
    client = MockBfxApiClient()

    exit_code = main(["buy", "--asset", "ETH", "--discount", "0.9"], service=_service(tmp_path, client))

    assert exit_code == 0
    assert [order["price"] for order in client.sent_orders] == [450_000.0]


def test_buy_rejects_unknown_asset_and_bad_discount(tmp_path: Path) -> None:
    client = MockBfxApiClient()
    service = _service(tmp_path, client)

    assert main(["buy", "--asset", "XRP"], service=service) == 2
    assert main(["buy", "--discount", "1.5"], service=service) == 2
    assert client.sent_orders == []


def test_buy_reports_failure_on_insufficient_balance(tmp_path: Path) -> None:
    client = MockBfxApiClient(jpy_available=100.0)

    assert main(["buy", "--asset", "BTC"], service=_service(tmp_path, client)) == 1
    assert client.sent_orders == []


def test_balance_and_stats(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    service = _service(tmp_path, MockBfxApiClient(jpy_available=42.0))

    assert main(["balance"], service=service) == 0
    balance = json.loads(capsys.readouterr().out)
    assert balance["availableBalance"] == 42.0

    assert main(["stats", "--asset", "BTC", "--period", "7days"], service=service) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats == {"totalProfit": 0.0, "profitPercentage": 0.0, "executionCount": 0, "period": "7days"}


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "balance" in capsys.readouterr().out
