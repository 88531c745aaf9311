"""Order books, order matching and SQLite-backed records for a small stock exchange."""

__version__ = "0.1.0"
__all__ = ["cli", "database", "order", "order_book", "trading_engine"]