"""Market data providers for the stock watchlist.

This module provides a unified interface (MarketDataProviderABC) over
several quote/history sources:

- MockProvider: Random data, no API key (default)
- FinnhubProvider: Finnhub search and quotes, Yahoo Finance history
- AlphaVantageProvider: Alpha Vantage for everything

All providers return the same SearchResult, Quote and Candle models and
raise MarketDataError subclasses on failure.

Example:
    async with create_market_data_provider("finnhub") as provider:
        quote = await provider.get_quote("AAPL", "US")
        print(f"{quote.key}: ${quote.price}")
"""
from stock_watchlist.providers.core import (
    MarketDataError,
    MarketDataProviderABC,
    NetworkFailure,
    NoQuoteData,
    ProviderErrorMapper,
    UnsupportedTimeframe,
    VendorInvalidResponse,
    VendorRateLimited,
    VendorTimeout,
)
from stock_watchlist.providers.factory import ProviderType, create_market_data_provider
from stock_watchlist.providers.stocks.alpha_vantage import AlphaVantageProvider
from stock_watchlist.providers.stocks.finnhub import FinnhubProvider
from stock_watchlist.providers.stocks.mock import MockProvider

__all__ = [
    "AlphaVantageProvider",
    "FinnhubProvider",
    "MarketDataError",
    "MarketDataProviderABC",
    "MockProvider",
    "NetworkFailure",
    "NoQuoteData",
    "ProviderErrorMapper",
    "ProviderType",
    "UnsupportedTimeframe",
    "VendorInvalidResponse",
    "VendorRateLimited",
    "VendorTimeout",
    "create_market_data_provider",
]
