"""SQLite persistence for orders and executed transactions."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .order import Order, OrderStatus

DEFAULT_PATH = "stock_exchange.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS order_records (
    order_id   INTEGER PRIMARY KEY AUTOINCREMENT,
    stock_id   INTEGER NOT NULL,
    user_id    INTEGER NOT NULL,
    units      INTEGER NOT NULL,
    price      INTEGER NOT NULL,
    status     TEXT    NOT NULL,
    order_type TEXT    NOT NULL
);
CREATE TABLE IF NOT EXISTS transactions (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    buy_order_id     INTEGER NOT NULL,
    sell_order_id    INTEGER NOT NULL,
    stock_id         INTEGER NOT NULL,
    units            INTEGER NOT NULL,
    buy_order_price  INTEGER NOT NULL,
    sell_order_price INTEGER NOT NULL
);
"""


class DatabaseError(Exception):
    """Raised when the order store cannot be read or written."""


class Database:
    """Thread-safe access to the exchange's SQLite file."""

    def __init__(self, path: str = DEFAULT_PATH) -> None:
        self.path = str(path)
        self._lock = threading.Lock()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                conn = sqlite3.connect(self.path)
            except sqlite3.Error as exc:
                raise DatabaseError(f"open error: {exc}") from exc
            conn.row_factory = sqlite3.Row
            try:
                with conn:
                    yield conn
            except sqlite3.Error as exc:
                raise DatabaseError(str(exc)) from exc
            finally:
                conn.close()

    def init_schema(self) -> None:
        """Create the order and transaction tables if they are missing."""
        with self._connect() as conn:
            conn.executescript(_SCHEMA)

    def insert_order(self, order: Order) -> int:
        """Store an order and return the order id the database assigned."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO order_records "
                "(stock_id, user_id, units, price, status, order_type) "
                "VALUES (?, ?, ?, ?, ?, ?);",
                (
                    order.stock_id,
                    order.user_id,
                    order.units,
                    order.price,
                    OrderStatus(order.status).value,
                    order.side(),
                ),
            )
            return int(cursor.lastrowid)

    def update_status(self, order: Order) -> None:
        """Write the order's current status to its stored record."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE order_records SET status = ? WHERE order_id = ?;",
                (OrderStatus(order.status).value, order.order_id),
            )

    def transaction_insert(self, buy: Order, sell: Order) -> None:
        """Record a trade between two orders for the smaller of their units."""
        traded = min(buy.units, sell.units)
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO transactions "
                "(buy_order_id, sell_order_id, stock_id, units, "
                "buy_order_price, sell_order_price) "
                "VALUES (?, ?, ?, ?, ?, ?);",
                (buy.order_id, sell.order_id, buy.stock_id, traded, buy.price, sell.price),
            )

    def display_orders(self) -> list[dict[str, Any]]:
        """Return every stored order as a dictionary, in table order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT order_id, stock_id, user_id, units, price, status, order_type "
                "FROM order_records;"
            ).fetchall()
        return [dict(row) for row in rows]

    def transactions_since(self, last_id: int = 0) -> list[dict[str, Any]]:
        """Return transactions with an id above ``last_id``, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, buy_order_id, sell_order_id, stock_id, units, sell_order_price "
                "FROM transactions WHERE id > ? ORDER BY id;",
                (last_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def latest_prices(self) -> list[tuple[int, int]]:
        """Return ``(stock_id, price)`` of each stock's most recent trade."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT stock_id, sell_order_price FROM ("
                "  SELECT *, ROW_NUMBER() OVER "
                "    (PARTITION BY stock_id ORDER BY id DESC) rn "
                "  FROM transactions"
                ") WHERE rn = 1 ORDER BY stock_id;"
            ).fetchall()
        return [(row[0], row[1]) for row in rows]