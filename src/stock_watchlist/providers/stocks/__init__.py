"""Stock market data providers."""
from stock_watchlist.providers.stocks.alpha_vantage import AlphaVantageProvider
from stock_watchlist.providers.stocks.finnhub import FinnhubProvider
from stock_watchlist.providers.stocks.mock import MockProvider

__all__ = ["AlphaVantageProvider", "FinnhubProvider", "MockProvider"]
