"""Core provider abstractions."""
from stock_watchlist.providers.core.error_mapper import ProviderErrorMapper
from stock_watchlist.providers.core.exceptions import (
    MarketDataError,
    NetworkFailure,
    NoQuoteData,
    UnsupportedTimeframe,
    VendorInvalidResponse,
    VendorRateLimited,
    VendorTimeout,
)
from stock_watchlist.providers.core.market_provider_abc import MarketDataProviderABC
from stock_watchlist.providers.core.utils import ordered_candles, round2

__all__ = [
    "MarketDataError",
    "MarketDataProviderABC",
    "NetworkFailure",
    "NoQuoteData",
    "ProviderErrorMapper",
    "UnsupportedTimeframe",
    "VendorInvalidResponse",
    "VendorRateLimited",
    "VendorTimeout",
    "ordered_candles",
    "round2",
]
