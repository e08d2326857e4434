from __future__ import annotations

import logging
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
from ods.bootstrap import get_connection, initialize_database
from ods.repository import OdsRepository
from ops.errors import OpsInsufficientBalanceError, OpsValidationError
from ops.service import CreateOrderCommand, OpsService

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def create_service(tmp_path: Path, *, jpy_available: float = 1_000_000.0) -> tuple[OpsService, MockBfxApiClient, Path]:
    db_path = tmp_path / "connector.db"
    initialize_database(db_path).close()
    client = MockBfxApiClient(jpy_available=jpy_available, acceptance_id="JRF-1")
    service = OpsService(
        DefaultBfxGateway(client),
        repository_factory=lambda: OdsRepository(conn=get_connection(db_path)),
        now_fn=lambda: NOW,
    )
    return service, client, db_path


def test_create_order_sends_limit_buy_and_records_it(tmp_path: Path) -> None:
    service, client, db_path = create_service(tmp_path)

    result = service.create_order(CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=9_700_000, amount=0.001))

    assert result == {
        "orderId": "JRF-1",
        "pair": "BTC/JPY",
        "orderType": "limit",
        "price": 9_700_000.0,
        "amount": 0.001,
        "estimatedTotal": 9700.0,
        "status": "pending",
    }
    assert client.sent_orders == [
        {
            "product_code": "BTC_JPY",
            "child_order_type": "LIMIT",
            "side": "BUY",
            "price": 9_700_000.0,
            "size": 0.001,
            "time_in_force": "GTC",
        }
    ]
    with OdsRepository(conn=get_connection(db_path)) as repo:
        stored = repo.get_buy_order("JRF-1")
    assert stored is not None
    assert stored.status == "ACTIVE"
    assert stored.product_code == "BTC_JPY"
    assert stored.created_at == NOW


@pytest.mark.parametrize(
    ("command", "code"),
    [
        (CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=0, amount=0.001), "INVALID_PRICE"),
        (CreateOrderCommand(pair="BTC/JPY", order_type="limit", price="abc", amount=0.001), "INVALID_PRICE"),
        (CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=100, amount=-1), "INVALID_AMOUNT"),
        (CreateOrderCommand(pair="XRP/JPY", order_type="limit", price=100, amount=1), "UNSUPPORTED_PAIR"),
        (CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=100, amount=0.0001), "INVALID_AMOUNT"),
        (CreateOrderCommand(pair="ETH/JPY", order_type="limit", price=100, amount=0.001), "INVALID_AMOUNT"),
        (CreateOrderCommand(pair="ETH/JPY", order_type="market", price=100, amount=0.01), "INVALID_REQUEST"),
    ],
)
def test_create_order_validation(tmp_path: Path, command: CreateOrderCommand, code: str) -> None:
    service, client, _ = create_service(tmp_path)

    with pytest.raises(OpsValidationError) as exc_info:
        service.create_order(command)

    assert exc_info.value.code == code
    assert client.sent_orders == []


def test_minimum_amount_message_names_asset(tmp_path: Path) -> None:
    service, _, _ = create_service(tmp_path)

    with pytest.raises(OpsValidationError) as exc_info:
        service.create_order(CreateOrderCommand(pair="ETH/JPY", order_type="limit", price=100, amount=0.001))

    assert str(exc_info.value) == "minimum order amount for ETH is 0.01"


def test_create_order_rejects_insufficient_balance(tmp_path: Path) -> None:
    service, client, _ = create_service(tmp_path, jpy_available=5000.0)

    with pytest.raises(OpsInsufficientBalanceError) as exc_info:
        service.create_order(CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=9_700_000, amount=0.001))

    assert exc_info.value.code == "INSUFFICIENT_BALANCE"
    assert exc_info.value.required == Decimal("9700.000")
    assert client.sent_orders == []


def test_record_failure_does_not_fail_accepted_order(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    service, client, db_path = create_service(tmp_path)
    conn = sqlite3.connect(db_path)
    conn.execute("DROP TABLE buy_orders")
    conn.commit()
    conn.close()

    with caplog.at_level(logging.WARNING, logger="cryptoconnector.ops"):
        result = service.create_order(
            CreateOrderCommand(pair="ETH/JPY", order_type="limit", price=485_000, amount=0.01)
        )

    assert result["orderId"] == "JRF-1"
    assert len(client.sent_orders) == 1
    assert "Failed to record buy order" in caplog.text


def test_order_without_store_is_not_recorded() -> None:
    client = MockBfxApiClient()
    service = OpsService(DefaultBfxGateway(client), now_fn=lambda: NOW)

    result = service.create_order(CreateOrderCommand(pair="ETH/JPY", order_type="limit", price=485_000, amount=0.01))

    assert result["estimatedTotal"] == 4850.0


def test_get_balance(tmp_path: Path) -> None:
    service, _, _ = create_service(tmp_path, jpy_available=123456.0)

    assert service.get_balance() == {
        "availableBalance": 123456.0,
        "currency": "JPY",
        "timestamp": int(NOW.timestamp()),
    }


def test_unopenable_store_does_not_fail_accepted_order(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    client = MockBfxApiClient(acceptance_id="JRF-2")
    # a directory cannot be opened as a database file
    service = OpsService(
        DefaultBfxGateway(client),
        repository_factory=lambda: OdsRepository(db_path=str(tmp_path)),
        now_fn=lambda: NOW,
    )

    with caplog.at_level(logging.WARNING, logger="cryptoconnector.ops"):
        result = service.create_order(CreateOrderCommand(pair="BTC/JPY", order_type="limit", price=100_000, amount=0.001))

    assert result["orderId"] == "JRF-2"
    assert len(client.sent_orders) == 1
    assert "failed to open order store" in caplog.text
