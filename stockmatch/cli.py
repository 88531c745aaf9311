"""Command-line modes: order entry, matching engine and live views."""

from __future__ import annotations

import itertools
import json
import sys
import time
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, TextIO

from .database import DEFAULT_PATH, Database, DatabaseError
from .order import Order, OrderStatus
from .trading_engine import TradingEngine

USAGE = (
    "Usage: stockmatch <mode> [database]\n"
    "Modes: engine | buy | sell | monitor | transactions | db | prices\n"
)

MONITOR_INTERVAL = 2.0
TRANSACTIONS_INTERVAL = 1.0
DB_VIEW_INTERVAL = 3.0
PRICES_INTERVAL = 3.0

_ACTIVE = {OrderStatus.PLACED.value, OrderStatus.PARTIALLY_EXECUTED.value}


def _cycles(iterations: int | None, delay: float) -> Iterator[int]:
    counter = itertools.count() if iterations is None else range(iterations)
    for n in counter:
        if n:
            time.sleep(delay)
        yield n


def _emit(out: TextIO | None, text: str) -> None:
    stream = out if out is not None else sys.stdout
    stream.write(text)
    stream.flush()


def best_quotes(
    orders: Iterable[Mapping[str, Any]],
) -> dict[int, tuple[int | None, int | None]]:
    """Best bid and ask of open orders per stock; every stock seen is listed."""
    quotes: dict[int, tuple[int | None, int | None]] = {}
    for order in orders:
        stock_id = order["stock_id"]
        bid, ask = quotes.get(stock_id, (None, None))
        if order["status"] in _ACTIVE:
            price = order["price"]
            if order["order_type"] == "BUY":
                bid = price if bid is None else max(bid, price)
            else:
                ask = price if ask is None else min(ask, price)
        quotes[stock_id] = (bid, ask)
    return quotes


def format_monitor(orders: Iterable[Mapping[str, Any]]) -> str:
    """Render the best bid/ask screen; missing quotes show as 0."""
    lines = ["\n=== MONITOR (best bid/ask) ===\n"]
    for stock_id, (bid, ask) in best_quotes(orders).items():
        lines.append(f"Stock {stock_id} | Bid: {bid or 0} | Ask: {ask or 0}\n")
    return "".join(lines)


def format_transaction(row: Mapping[str, Any]) -> str:
    """One line of the live transaction feed."""
    return (
        f"[TX {row['id']}] Stock {row['stock_id']} | Qty {row['units']}"
        f" @ {row['sell_order_price']}"
        f" (B#{row['buy_order_id']} / S#{row['sell_order_id']})"
    )


def format_order_record(order: Mapping[str, Any]) -> str:
    """One stored order as shown in the database view."""
    return (
        f"ID#{order['order_id']} | S{order['stock_id']} | U{order['user_id']}"
        f" | {order['units']} @ {order['price']}"
        f" | {json.dumps(order['status'])} / {json.dumps(order['order_type'])}"
    )


def format_db_view(
    orders: Iterable[Mapping[str, Any]],
    transactions: Iterable[Mapping[str, Any]],
) -> str:
    """Render both tables of the store."""
    lines = ["\n--- order_records ---\n"]
    lines.extend(format_order_record(order) + "\n" for order in orders)
    lines.append("\n--- transactions ---\n")
    lines.extend(
        f"TX#{tx['id']} | B#{tx['buy_order_id']} / S#{tx['sell_order_id']}"
        f" | S{tx['stock_id']} | {tx['units']} @ {tx['sell_order_price']}\n"
        for tx in transactions
    )
    return "".join(lines)


def format_prices(prices: Iterable[tuple[int, int]]) -> str:
    """Render latest trade prices, highest price first."""
    ordered = sorted(prices, key=lambda item: item[1], reverse=True)
    lines = ["\n*** Stock Prices (Latest) ***\n"]
    lines.extend(f"Stock {stock_id} → {price}\n" for stock_id, price in ordered)
    return "".join(lines)


def run_order_entry(
    database: Database,
    is_buy: bool,
    lines: Iterable[str],
    out: TextIO | None = None,
) -> list[int]:
    """Read ``stock_id units price user_id`` groups and store each as an order.

    Reading stops at the end of input or at the first field that is not an
    integer. Returns the ids the store assigned.
    """
    side = "BUY" if is_buy else "SELL"
    prompt = f"[{side}] Enter: stock_id units price user_id → "
    tokens = (token for line in lines for token in line.split())
    assigned: list[int] = []
    while True:
        _emit(out, prompt)
        fields = list(itertools.islice(tokens, 4))
        if len(fields) < 4:
            break
        try:
            stock_id, units, price, user_id = (int(field) for field in fields)
        except ValueError:
            break
        order = Order(stock_id=stock_id, user_id=user_id, units=units, price=price, is_buy=is_buy)
        try:
            order_id = database.insert_order(order)
        except DatabaseError as exc:
            print(f"[DB] {exc}", file=sys.stderr)
            continue
        assigned.append(order_id)
        colour = "\033[32m" if is_buy else "\033[31m"
        label = "Buy " if is_buy else "Sell "
        _emit(out, f"{colour}{label}order #{order_id}\033[0m\n")
    return assigned


def run_monitor_mode(
    database: Database, out: TextIO | None = None, iterations: int | None = None
) -> None:
    """Repeatedly print the best bid and ask of stored open orders."""
    for _ in _cycles(iterations, MONITOR_INTERVAL):
        _emit(out, format_monitor(database.display_orders()))


def run_transactions_mode(
    database: Database, out: TextIO | None = None, iterations: int | None = None
) -> int:
    """Print each new transaction as it appears; return the last id seen."""
    last_id = 0
    for _ in _cycles(iterations, TRANSACTIONS_INTERVAL):
        try:
            rows = database.transactions_since(last_id)
        except DatabaseError:
            continue
        for row in rows:
            last_id = row["id"]
            _emit(out, format_transaction(row) + "\n")
    return last_id


def run_db_view_mode(
    database: Database, out: TextIO | None = None, iterations: int | None = None
) -> None:
    """Repeatedly print all stored orders and transactions."""
    for _ in _cycles(iterations, DB_VIEW_INTERVAL):
        _emit(out, format_db_view(database.display_orders(), database.transactions_since(0)))


def run_prices_mode(
    database: Database, out: TextIO | None = None, iterations: int | None = None
) -> None:
    """Repeatedly print each stock's latest traded price."""
    for _ in _cycles(iterations, PRICES_INTERVAL):
        _emit(out, format_prices(database.latest_prices()))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the mode named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write(USAGE)
        return 1
    mode = args[0]
    path = args[1] if len(args) > 1 else DEFAULT_PATH

    modes = {
        "monitor": run_monitor_mode,
        "transactions": run_transactions_mode,
        "db": run_db_view_mode,
        "prices": run_prices_mode,
    }
    if mode not in modes and mode not in ("engine", "buy", "sell"):
        print(f"Unknown mode: {mode}", file=sys.stderr)
        return 1

    database = Database(path)
    try:
        database.init_schema()
        if mode == "engine":
            TradingEngine(database).run_matcher()
        elif mode in ("buy", "sell"):
            run_order_entry(database, mode == "buy", sys.stdin)
        else:
            modes[mode](database)
    except KeyboardInterrupt:
        pass
    except DatabaseError as exc:
        print(f"[DB] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())