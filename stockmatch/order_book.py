"""Per-stock order book with price-priority matching."""

from __future__ import annotations

import heapq
import itertools
import threading

from .order import Order


class OrderBook:
    """Holds resting buy and sell orders for one stock.

    Bids are served highest price first, asks lowest price first; orders at
    the same price are served in arrival order.
    """

    def __init__(self, stock_id: int = 0) -> None:
        self.stock_id = stock_id
        self._bids: list[tuple[int, int, Order]] = []
        self._asks: list[tuple[int, int, Order]] = []
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    def add_order(self, order: Order) -> None:
        """Rest an order on the side given by ``order.is_buy``."""
        with self._lock:
            seq = next(self._sequence)
            if order.is_buy:
                heapq.heappush(self._bids, (-order.price, seq, order))
            else:
                heapq.heappush(self._asks, (order.price, seq, order))

    def match_order(self) -> tuple[Order, Order] | None:
        """Pop the best bid and ask if they cross, else return ``None``."""
        with self._lock:
            if not self._bids or not self._asks:
                return None
            if -self._bids[0][0] < self._asks[0][0]:
                return None
            buy = heapq.heappop(self._bids)[2]
            sell = heapq.heappop(self._asks)[2]
            return buy, sell

    def best_bid(self) -> int | None:
        """Highest resting buy price, or ``None`` when there are no bids."""
        with self._lock:
            return -self._bids[0][0] if self._bids else None

    def best_ask(self) -> int | None:
        """Lowest resting sell price, or ``None`` when there are no asks."""
        with self._lock:
            return self._asks[0][0] if self._asks else None