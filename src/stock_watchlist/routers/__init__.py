"""API routers for the stock watchlist.

Includes routes for:
- /stocks - search, quotes, batch quotes and history
- /stocks/stream - WebSocket quote stream (polling)
"""
from stock_watchlist.routers.stocks import router as stocks_router

__all__ = ["stocks_router"]
