from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterator

from mkt.catalog import find_by_symbol
from ods.bootstrap import DEFAULT_DB_PATH, get_connection, to_db_timestamp

from .errors import ThrInvalidFilterError, ThrStorageError
from .mapper import to_transaction
from .models import MatchedTrade, Period, TradeStatistics, TransactionPage
from .reporting import aggregate_statistics, build_pagination, calc_trade_profit
from .validators import ASSET_FILTER_ALL, ASSET_FILTERS, TIME_FILTER_7DAYS

SELL_FILLED_STATUS = "FILLED"
RECENT_WINDOW = timedelta(days=7)

_MATCHED_TRADES_FROM = """
    FROM sell_orders s
    INNER JOIN buy_orders b ON s.parent_order_id = b.order_id
    WHERE s.status = ?
"""

_LOGGER = logging.getLogger("cryptoconnector.thr.repository")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


def _row_to_trade(row: sqlite3.Row) -> MatchedTrade:
    return MatchedTrade(
        id=int(row["id"]),
        sell_order_id=row["order_id"],
        buy_order_id=row["buy_order_id"],
        product_code=row["product_code"],
        sell_price=_to_decimal(row["sell_price"]),
        buy_price=_to_decimal(row["buy_price"]),
        size=_to_decimal(row["size"]),
        closed_at=datetime.fromisoformat(row["updated_at"]),
    )


class ThrRepository:
    """Read-only aggregation over matched buy/sell order pairs.

    A pair participates when the sell order is FILLED and its ``parent_order_id``
    names an existing buy order. The buy order's own status is not checked.

    Without ``conn`` the connection is opened on first use; failing to open it raises
    ``ThrStorageError``. A page and its total count are read in one transaction.
    """

    def __init__(
        self,
        conn: sqlite3.Connection | None = None,
        db_path: str = str(DEFAULT_DB_PATH),
        *,
        now_fn: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._conn = conn
        self.db_path = db_path
        self._now_fn = now_fn

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = get_connection(self.db_path)
            except (sqlite3.Error, OSError) as exc:
                raise ThrStorageError(f"failed to open trade store: {exc}") from exc
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()

    @contextmanager
    def _read_snapshot(self) -> Iterator[sqlite3.Connection]:
        conn = self.conn
        if conn.in_transaction:
            yield conn
            return
        conn.execute("BEGIN")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()

    def __enter__(self) -> "ThrRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _filter_sql(self, asset_filter: str, time_filter: str) -> tuple[str, list[object]]:
        clauses: list[str] = []
        args: list[object] = [SELL_FILLED_STATUS]

        if asset_filter != ASSET_FILTER_ALL:
            asset = find_by_symbol(asset_filter)
            if asset is None:
                raise ThrInvalidFilterError(field="asset_filter", value=asset_filter, allowed=ASSET_FILTERS)
            clauses.append("s.product_code = ?")
            args.append(asset.product_code)
        if time_filter == TIME_FILTER_7DAYS:
            clauses.append("s.updated_at >= ?")
            args.append(to_db_timestamp(self._now_fn() - RECENT_WINDOW))

        where_sql = _MATCHED_TRADES_FROM
        if clauses:
            where_sql += " AND " + " AND ".join(clauses)
        return where_sql, args

    @staticmethod
    def _count(conn: sqlite3.Connection, where_sql: str, args: list[object]) -> int:
        row = conn.execute(f"SELECT COUNT(*) AS total {where_sql}", args).fetchone()
        return int(row["total"]) if row else 0

    def get_total_count(self, asset_filter: str, time_filter: str) -> int:
        where_sql, args = self._filter_sql(asset_filter, time_filter)
        try:
            return self._count(self.conn, where_sql, args)
        except sqlite3.Error as exc:
            raise ThrStorageError(f"failed to get transaction count: {exc}") from exc

    def get_statistics(self, asset_filter: str, time_filter: str) -> TradeStatistics:
        where_sql, args = self._filter_sql(asset_filter, time_filter)
        try:
            rows = self.conn.execute(
                f"""
                SELECT s.price AS sell_price, b.price AS buy_price, s.size
                {where_sql}
                """,
                args,
            ).fetchall()
        except sqlite3.Error as exc:
            raise ThrStorageError(f"failed to query trade statistics: {exc}") from exc

        period: Period = "7days" if time_filter == TIME_FILTER_7DAYS else "all"
        profits = (
            calc_trade_profit(_to_decimal(row["sell_price"]), _to_decimal(row["buy_price"]), _to_decimal(row["size"]))
            for row in rows
        )
        statistics = aggregate_statistics(profits, period)
        _LOGGER.debug(
            "Trade statistics computed: asset_filter=%s time_filter=%s count=%s total_profit=%s",
            asset_filter,
            time_filter,
            statistics.execution_count,
            statistics.total_profit,
        )
        return statistics

    def get_transactions(self, asset_filter: str, time_filter: str, page: int, limit: int) -> TransactionPage:
        where_sql, args = self._filter_sql(asset_filter, time_filter)
        offset = (page - 1) * limit
        try:
            with self._read_snapshot() as conn:
                rows = conn.execute(
                    f"""
                    SELECT s.id, s.order_id, b.order_id AS buy_order_id, s.product_code,
                           s.price AS sell_price, b.price AS buy_price, s.size, s.updated_at
                    {where_sql}
                    ORDER BY s.updated_at DESC, s.id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (*args, limit, offset),
                ).fetchall()
                total_count = self._count(conn, where_sql, args)
        except sqlite3.Error as exc:
            raise ThrStorageError(f"failed to query trade transactions: {exc}") from exc

        transactions = [to_transaction(_row_to_trade(row)) for row in rows]
        return TransactionPage(
            transactions=transactions,
            pagination=build_pagination(page, limit, total_count),
        )
