"""Service layer: provider orchestration and exception-to-HTTP mapping."""
from stock_watchlist.services.market_service import MarketDataService, to_timeframe

__all__ = ["MarketDataService", "to_timeframe"]
