import io

import pytest

from stockmatch.database import Database
from stockmatch.order import Order, OrderStatus
from stockmatch.trading_engine import TradingEngine


class _StopAfter:
    """Stop signal that reports set after a number of waits."""

    def __init__(self, waits):
        self.waits = waits
        self.count = 0

    def is_set(self):
        return self.count >= self.waits

    def wait(self, timeout=None):
        self.count += 1
        return self.is_set()


@pytest.fixture
def database(tmp_path):
    db = Database(str(tmp_path / "exchange.db"))
    db.init_schema()
    return db


@pytest.fixture
def engine(database):
    return TradingEngine(database)


def _statuses(database):
    return {row["order_id"]: row["status"] for row in database.display_orders()}


def test_place_order_assigns_id_and_stores(engine, database):
    order = Order(stock_id=1, user_id=7, units=10, price=100, is_buy=True)
    order_id = engine.place_order(order)
    assert order.order_id == order_id
    rows = database.display_orders()
    assert [row["order_id"] for row in rows] == [order_id]
    assert rows[0]["order_type"] == "BUY"
    assert engine.quotes() == {1: (100, None)}


def test_partial_fill_leaves_residual(engine, database):
    buy = Order(stock_id=1, user_id=1, units=10, price=100, is_buy=True)
    sell = Order(stock_id=1, user_id=2, units=4, price=95, is_buy=False)
    buy_id = engine.place_order(buy)
    sell_id = engine.place_order(sell)

    assert engine.match_once() == 1
    statuses = _statuses(database)
    assert statuses[buy_id] == "Partially Executed"
    assert statuses[sell_id] == "Fully Executed"

    trades = database.transactions_since(0)
    assert len(trades) == 1
    assert trades[0]["units"] == 4
    assert trades[0]["sell_order_price"] == 95
    assert trades[0]["buy_order_id"] == buy_id
    assert trades[0]["sell_order_id"] == sell_id
    assert engine.quotes() == {1: (100, None)}


def test_residual_fills_later(engine, database):
    buy = Order(stock_id=1, user_id=1, units=10, price=100, is_buy=True)
    buy_id = engine.place_order(buy)
    engine.place_order(Order(stock_id=1, user_id=2, units=4, price=95, is_buy=False))
    engine.match_once()
    engine.place_order(Order(stock_id=1, user_id=3, units=6, price=100, is_buy=False))
    assert engine.match_once() == 1
    assert _statuses(database)[buy_id] == "Fully Executed"
    assert sum(t["units"] for t in database.transactions_since(0)) == 10
    assert engine.quotes() == {1: (None, None)}


def test_no_match_when_not_crossing(engine, database):
    engine.place_order(Order(stock_id=3, user_id=1, units=5, price=90, is_buy=True))
    engine.place_order(Order(stock_id=3, user_id=2, units=5, price=100, is_buy=False))
    assert engine.match_once() == 0
    assert database.transactions_since(0) == []
    assert engine.quotes() == {3: (90, 100)}


def test_books_are_per_stock(engine, database):
    engine.place_order(Order(stock_id=1, user_id=1, units=5, price=100, is_buy=True))
    engine.place_order(Order(stock_id=2, user_id=2, units=5, price=50, is_buy=False))
    assert engine.match_once() == 0
    assert engine.quotes() == {1: (100, None), 2: (None, 50)}


def test_settle_trade_updates_orders(engine, database):
    buy = Order(stock_id=1, user_id=1, units=3, price=10, is_buy=True)
    sell = Order(stock_id=1, user_id=2, units=5, price=10, is_buy=False)
    buy.order_id = database.insert_order(buy)
    sell.order_id = database.insert_order(sell)
    traded = engine.settle_trade(buy, sell)
    assert traded == 3
    assert (buy.units, sell.units) == (0, 2)
    assert buy.status is OrderStatus.FULLY_EXECUTED
    assert sell.status is OrderStatus.PARTIALLY_EXECUTED
    assert database.transactions_since(0)[0]["units"] == 3


def test_run_matcher_stops(engine, database):
    engine.place_order(Order(stock_id=1, user_id=1, units=2, price=10, is_buy=True))
    engine.place_order(Order(stock_id=1, user_id=2, units=2, price=10, is_buy=False))
    stop = _StopAfter(1)
    engine.run_matcher(interval=0, stop=stop)
    assert stop.count == 1
    assert len(database.transactions_since(0)) == 1


def test_run_monitor_prints_quotes(engine):
    engine.place_order(Order(stock_id=1, user_id=1, units=2, price=90, is_buy=True))
    out = io.StringIO()
    engine.run_monitor(out=out, interval=0, stop=_StopAfter(2))
    text = out.getvalue()
    assert "=== Live Order Books ===" in text
    assert "Stock 1 | Best Bid: 90 | Best Ask: -1" in text
    assert text.count("Live Order Books") == 1


def test_run_monitor_silent_while_input_active(engine):
    engine.place_order(Order(stock_id=1, user_id=1, units=2, price=90, is_buy=True))
    engine.input_active.set()
    out = io.StringIO()
    engine.run_monitor(out=out, interval=0, stop=_StopAfter(3))
    assert out.getvalue() == ""