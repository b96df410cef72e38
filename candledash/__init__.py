"""Live terminal candlestick dashboard for synthetic market data."""

__version__ = "0.1.0"
