"""Alpha Vantage provider."""
from stock_watchlist.providers.stocks.alpha_vantage.alpha_vantage_provider import (
    AlphaVantageProvider,
)

__all__ = ["AlphaVantageProvider"]
