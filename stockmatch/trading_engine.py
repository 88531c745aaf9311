"""Matching engine that pairs crossing orders and settles them in the store."""

from __future__ import annotations

import sys
import threading
import time
from typing import Protocol, TextIO

from .database import Database
from .order import Order, OrderStatus
from .order_book import OrderBook


class _Stopper(Protocol):
    def is_set(self) -> bool: ...

    def wait(self, timeout: float | None = None) -> bool: ...


class TradingEngine:
    """Keeps one order book per stock and executes trades between them."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.input_active = threading.Event()
        self._books: dict[int, OrderBook] = {}
        self._lock = threading.Lock()

    def place_order(self, order: Order) -> int:
        """Store the order, rest it on its stock's book and return its id."""
        order.order_id = self.database.insert_order(order)
        with self._lock:
            book = self._books.setdefault(order.stock_id, OrderBook(order.stock_id))
            book.add_order(order)
        return order.order_id

    def match_once(self) -> int:
        """Execute every crossing pair on every book; return the trade count."""
        trades = 0
        with self._lock:
            for book in self._books.values():
                while (pair := book.match_order()) is not None:
                    buy, sell = pair
                    self.settle_trade(buy, sell)
                    trades += 1
                    if buy.units > 0:
                        book.add_order(buy)
                    if sell.units > 0:
                        book.add_order(sell)
        return trades

    def run_matcher(self, interval: float = 0.05, stop: _Stopper | None = None) -> None:
        """Match repeatedly, pausing ``interval`` seconds, until ``stop`` is set."""
        while stop is None or not stop.is_set():
            self.match_once()
            if stop is None:
                time.sleep(interval)
            else:
                stop.wait(interval)

    def settle_trade(self, buy: Order, sell: Order) -> int:
        """Record the trade, reduce both orders and persist their new status.

        Returns the number of units traded.
        """
        traded = min(buy.units, sell.units)
        self.database.transaction_insert(buy, sell)
        buy.units -= traded
        sell.units -= traded
        for order in (buy, sell):
            order.status = (
                OrderStatus.PARTIALLY_EXECUTED if order.units > 0 else OrderStatus.FULLY_EXECUTED
            )
            self.database.update_status(order)
        return traded

    def quotes(self) -> dict[int, tuple[int | None, int | None]]:
        """Map each stock id to its ``(best_bid, best_ask)``."""
        with self._lock:
            return {
                stock_id: (book.best_bid(), book.best_ask())
                for stock_id, book in self._books.items()
            }

    def run_monitor(
        self,
        out: TextIO | None = None,
        interval: float = 2.0,
        stop: _Stopper | None = None,
    ) -> None:
        """Print best bid and ask per stock every ``interval`` seconds.

        Nothing is printed while ``input_active`` is set. Missing quotes
        are shown as -1.
        """
        stop = stop if stop is not None else threading.Event()
        while not stop.wait(interval):
            if self.input_active.is_set():
                continue
            stream = out if out is not None else sys.stdout
            lines = ["\n=== Live Order Books ===\n"]
            for stock_id, (bid, ask) in self.quotes().items():
                lines.append(
                    f"Stock {stock_id} | Best Bid: {-1 if bid is None else bid}"
                    f" | Best Ask: {-1 if ask is None else ask}\n"
                )
            stream.write("".join(lines))
            stream.flush()