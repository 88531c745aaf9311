import pytest

from stockmatch.order import Order, OrderStatus


def test_buy_side():
    order = Order(stock_id=1, user_id=7, units=10, price=100, is_buy=True)
    assert order.side() == "BUY"


def test_sell_side():
    order = Order(stock_id=1, user_id=7, units=10, price=100, is_buy=False)
    assert order.side() == "SELL"


def test_default_status_is_placed():
    order = Order(stock_id=2, user_id=3, units=5, price=50, is_buy=True)
    assert order.status is OrderStatus.PLACED
    assert order.status.value == "Placed"
    assert order.order_id == 0


def test_status_from_string_is_coerced():
    order = Order(2, 3, 5, 50, False, status="Partially Executed")
    assert order.status is OrderStatus.PARTIALLY_EXECUTED


def test_status_text_matches_stored_form():
    order = Order(4, 9, 3, 75, True, status="Fully Executed")
    assert order.status is OrderStatus.FULLY_EXECUTED
    assert str(order.status) == "Fully Executed"


def test_unknown_status_rejected():
    with pytest.raises(ValueError):
        Order(1, 1, 1, 1, True, status="Cancelled")


def test_orders_are_mutable():
    order = Order(1, 1, 10, 100, True)
    order.units -= 4
    assert order.units == 6