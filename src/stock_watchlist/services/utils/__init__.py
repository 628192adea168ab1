"""Service helpers (WebSocket streaming)."""
from stock_watchlist.services.utils.stream_handler import (
    handle_websocket_stream,
    parse_stocks_param,
)

__all__ = ["handle_websocket_stream", "parse_stocks_param"]
