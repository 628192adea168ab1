"""Stock watchlist market data service."""
