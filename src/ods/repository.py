from __future__ import annotations

import sqlite3
from datetime import date, datetime
from decimal import Decimal

from .bootstrap import DEFAULT_DB_PATH, get_connection, to_db_decimal, to_db_timestamp
from .errors import OdsStorageError
from .models import BuyOrder, DailyAveragePrice, PriceHistory, SellOrder


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


class OdsRepository:
    """Order store over one sqlite connection.

    Without ``conn`` the connection to ``db_path`` is opened on first use, and a failure
    to open it surfaces as ``OdsStorageError`` like any other store failure. The schema
    must already exist (``initialize_database``).
    """

    def __init__(self, conn: sqlite3.Connection | None = None, db_path: str = str(DEFAULT_DB_PATH)) -> None:
        self._conn = conn
        self.db_path = db_path

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = get_connection(self.db_path)
            except (sqlite3.Error, OSError) as exc:
                raise OdsStorageError("failed to open order store", exc) from exc
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()

    def __enter__(self) -> "OdsRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def save_buy_order(self, order: BuyOrder) -> int:
        try:
            with self.conn:
                cursor = self.conn.execute(
                    """
                    INSERT INTO buy_orders(
                        order_id, product_code, side, price, size,
                        exchange, status, remarks, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.order_id,
                        order.product_code,
                        order.side,
                        to_db_decimal(order.price),
                        to_db_decimal(order.size),
                        order.exchange,
                        order.status,
                        order.remarks,
                        to_db_timestamp(order.created_at),
                        to_db_timestamp(order.updated_at),
                    ),
                )
        except sqlite3.Error as exc:
            raise OdsStorageError("failed to save buy order", exc) from exc
        return int(cursor.lastrowid)

    def save_sell_order(self, order: SellOrder) -> int:
        try:
            with self.conn:
                cursor = self.conn.execute(
                    """
                    INSERT INTO sell_orders(
                        parent_order_id, order_id, product_code, side, price, size,
                        exchange, status, remarks, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.parent_order_id,
                        order.order_id,
                        order.product_code,
                        order.side,
                        to_db_decimal(order.price),
                        to_db_decimal(order.size),
                        order.exchange,
                        order.status,
                        order.remarks,
                        to_db_timestamp(order.created_at),
                        to_db_timestamp(order.updated_at),
                    ),
                )
        except sqlite3.Error as exc:
            raise OdsStorageError("failed to save sell order", exc) from exc
        return int(cursor.lastrowid)

    def get_buy_order(self, order_id: str) -> BuyOrder | None:
        try:
            row = self.conn.execute(
                """
                SELECT id, order_id, product_code, side, price, size,
                       exchange, status, remarks, created_at, updated_at
                FROM buy_orders
                WHERE order_id = ?
                """,
                (order_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise OdsStorageError("failed to get buy order", exc) from exc

        if not row:
            return None

        return BuyOrder(
            id=int(row["id"]),
            order_id=row["order_id"],
            product_code=row["product_code"],
            side=row["side"],
            price=_to_decimal(row["price"]),
            size=_to_decimal(row["size"]),
            exchange=row["exchange"],
            status=row["status"],
            remarks=row["remarks"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def append_price_history(self, entry: PriceHistory) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    """
                    INSERT INTO price_histories(recorded_at, product_code, price, price_ratio_24h)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        to_db_timestamp(entry.recorded_at),
                        entry.product_code,
                        to_db_decimal(entry.price),
                        to_db_decimal(entry.price_ratio_24h) if entry.price_ratio_24h is not None else None,
                    ),
                )
        except sqlite3.Error as exc:
            raise OdsStorageError("failed to append price history", exc) from exc

    def list_daily_average_prices(self, product_code: str, since: date) -> list[DailyAveragePrice]:
        # recorded_at is UTC ISO text, so its first ten characters are the UTC calendar day
        try:
            rows = self.conn.execute(
                """
                SELECT substr(recorded_at, 1, 10) AS day, AVG(CAST(price AS REAL)) AS avg_price
                FROM price_histories
                WHERE product_code = ? AND recorded_at >= ?
                GROUP BY day
                ORDER BY day ASC
                """,
                (product_code, since.isoformat()),
            ).fetchall()
        except sqlite3.Error as exc:
            raise OdsStorageError("failed to query price histories", exc) from exc

        return [
            DailyAveragePrice(day=date.fromisoformat(row["day"]), price=_to_decimal(row["avg_price"]))
            for row in rows
        ]
