"""Yahoo Finance chart client (historical fallback for Finnhub)."""
from stock_watchlist.providers.stocks.yahoo.yahoo_chart_client import YahooChartClient

__all__ = ["YahooChartClient"]
