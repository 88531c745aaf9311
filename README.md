# stockmatch

A small stock exchange that runs from the command line. Orders and
executed trades are kept in a SQLite database. Each stock has its own
order book, and the book pairs the highest bid with the lowest ask.

## Installing

```
pip install .
```

## Running

Every part of the exchange is a mode of one command:

```
stockmatch <mode> [database]
```

`database` is the path of the SQLite file. If it is left out, the
command uses `stock_exchange.db` in the working directory. The order and
transaction tables are created if they are missing.

| Mode           | What it does                                                          |
|----------------|-----------------------------------------------------------------------|
| `engine`       | Runs the matcher every 50 ms until interrupted.                       |
| `buy`          | Reads buy orders from standard input and stores them.                 |
| `sell`         | Reads sell orders from standard input and stores them.                |
| `monitor`      | Every 2 s, prints the best bid and ask per stock from stored orders.  |
| `transactions` | Every second, prints trades stored since the last poll.               |
| `db`           | Every 3 s, prints all stored orders and all transactions.             |
| `prices`       | Every 3 s, prints the latest trade price per stock, highest first.    |

In `buy` and `sell` mode, give each order as four integers:

```
stock_id units price user_id
```

Prices are integer units, for example cents. The input is read as
whitespace-separated fields in groups of four, so an order may span
lines. Each stored order gets an id from the database, and that id is
echoed back. Reading stops at end of input or at the first field that is
not an integer. If an order cannot be stored, the error goes to standard
error and reading goes on.

`monitor` counts only orders whose status is `Placed` or
`Partially Executed`. A stock with no open bid or no open ask shows `0`
for it.

With no mode, the command prints a usage line and exits with status 1.
An unknown mode also exits with status 1. A database error is printed to
standard error and exits with status 1. Ctrl-C stops any mode and exits
with status 0.

## Matching rules

- A buy and a sell match only when the highest bid is at least the
  lowest ask. At the same price, the order that came first goes first.
- The traded quantity is the smaller of the two sizes. Any leftover part
  of an order goes back into the book.
- A new order is `Placed`. An order with units left after a trade is
  `Partially Executed`. An order with none left is `Fully Executed`.
- Each trade stores both order prices. The sell price is the one shown
  as the trade price.

## Using it as a library

```python
from stockmatch.database import Database
from stockmatch.order import Order
from stockmatch.trading_engine import TradingEngine

db = Database("exchange.db")
db.init_schema()
engine = TradingEngine(db)
engine.place_order(Order(stock_id=1, user_id=7, units=10, price=105, is_buy=True))
engine.place_order(Order(stock_id=1, user_id=8, units=4, price=100, is_buy=False))
engine.match_once()            # number of trades executed
print(engine.quotes())         # {1: (105, None)}
print(db.latest_prices())      # [(1, 100)]
```

- `stockmatch.order`: `Order` and `OrderStatus`.
- `stockmatch.order_book`: `OrderBook` with `add_order`, `match_order`,
  `best_bid` and `best_ask`.
- `stockmatch.database`: `Database`, which stores orders and
  transactions and raises `DatabaseError` on failure.
- `stockmatch.trading_engine`: `TradingEngine` with `place_order`,
  `match_once`, `run_matcher`, `settle_trade`, `quotes` and `run_monitor`.
  `run_monitor` prints nothing while the engine's `input_active` event
  is set.
- `stockmatch.cli`: the command, and the functions that format each view.

## What it does not do

The order books live in memory inside one `TradingEngine`. The engine
does not load orders from the database. So `stockmatch engine` matches
only orders placed through that engine object. Orders entered in `buy`
or `sell` mode are stored in the database, but a separate `engine`
process never sees them. To get matching, place orders with
`TradingEngine.place_order` in the same program that runs the engine.