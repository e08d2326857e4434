from __future__ import annotations

from decimal import Decimal
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from thr.reporting import (
    aggregate_statistics,
    build_pagination,
    calc_profit_percentage,
    calc_trade_profit,
    q_profit,
)


def test_trade_profit_applies_fee_factor() -> None:
    profit = calc_trade_profit(Decimal("6000000"), Decimal("5800000"), Decimal("0.1"))

    # 20000 * 0.9989
    assert profit == Decimal("19978.0")


def test_trade_profit_loss_is_negative() -> None:
    assert calc_trade_profit(Decimal("100"), Decimal("200"), Decimal("1")) == Decimal("-99.9")


def test_trade_profit_rounds_ties_away_from_zero() -> None:
    # gross 4500 -> 4495.05 after fee
    assert calc_trade_profit(Decimal("4600"), Decimal("100"), Decimal("1")) == Decimal("4495.1")
    assert calc_trade_profit(Decimal("100"), Decimal("4600"), Decimal("1")) == Decimal("-4495.1")


def test_q_profit_half_up() -> None:
    assert q_profit(Decimal("19977.85")) == Decimal("19977.9")
    assert q_profit(Decimal("19977.84")) == Decimal("19977.8")
    assert q_profit(Decimal("-0.05")) == Decimal("-0.1")
    assert q_profit(Decimal("0.04")) == Decimal("0.0")


def test_profit_percentage_uses_reference_notional() -> None:
    assert calc_profit_percentage(Decimal("19978.0"), 1) == Decimal("20.0")
    assert calc_profit_percentage(Decimal("1000"), 2) == Decimal("0.5")
    assert calc_profit_percentage(Decimal("0"), 3) == Decimal("0.0")
    assert calc_profit_percentage(Decimal("123.4"), 0) == Decimal("0.0")


def test_aggregate_statistics_sums_rounded_profits() -> None:
    profits = [Decimal("19978.0"), Decimal("-9989.0"), Decimal("998.9")]

    stats = aggregate_statistics(profits, "all")

    assert stats.execution_count == 3
    assert stats.total_profit == Decimal("10987.9")
    assert stats.profit_percentage == Decimal("3.7")
    assert stats.period == "all"


def test_aggregate_statistics_empty() -> None:
    stats = aggregate_statistics([], "7days")

    assert stats.execution_count == 0
    assert stats.total_profit == Decimal("0.0")
    assert stats.profit_percentage == Decimal("0.0")
    assert stats.period == "7days"


def test_pagination_pages_and_has_next() -> None:
    first = build_pagination(page=1, limit=5, total_count=10)
    second = build_pagination(page=2, limit=5, total_count=10)

    assert first.total_pages == 2
    assert first.has_next is True
    assert second.total_pages == 2
    assert second.has_next is False

    assert build_pagination(page=1, limit=5, total_count=11).total_pages == 3
    assert build_pagination(page=3, limit=5, total_count=11).has_next is False


def test_pagination_empty_result() -> None:
    pagination = build_pagination(page=1, limit=10, total_count=0)

    assert pagination.total_pages == 0
    assert pagination.total_count == 0
    assert pagination.has_next is False
