"""Order records exchanged between the order book, the engine and the store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle state of an order."""

    PLACED = "Placed"
    PARTIALLY_EXECUTED = "Partially Executed"
    FULLY_EXECUTED = "Fully Executed"

    def __str__(self) -> str:
        return self.value


@dataclass
class Order:
    """A single buy or sell order; prices are integer units such as cents."""

    stock_id: int
    user_id: int
    units: int
    price: int
    is_buy: bool
    status: OrderStatus = OrderStatus.PLACED
    order_id: int = 0

    def __post_init__(self) -> None:
        self.status = OrderStatus(self.status)

    def side(self) -> str:
        """Return the order type as stored: ``"BUY"`` or ``"SELL"``."""
        return "BUY" if self.is_buy else "SELL"