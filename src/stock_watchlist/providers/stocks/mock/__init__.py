"""Mock provider (no API key, random data)."""
from stock_watchlist.providers.stocks.mock.mock_provider import MockProvider

__all__ = ["MockProvider"]
