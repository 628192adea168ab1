"""Finnhub provider (quotes/search) with Yahoo Finance history."""
from stock_watchlist.providers.stocks.finnhub.finnhub_provider import FinnhubProvider

__all__ = ["FinnhubProvider"]
