"""FastAPI dependency injection: app.state holds the service; Depends() resolves it.

The lifespan (main.py) takes the service from the DI container once and attaches
it to app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Request, WebSocket

from stock_watchlist.services import MarketDataService


def get_market_data_service(request: Request) -> MarketDataService:
    """Resolve MarketDataService from app.state (created at startup)."""
    return request.app.state.market_data_service


def get_market_data_service_ws(websocket: WebSocket) -> MarketDataService:
    """Resolve MarketDataService for WebSocket routes."""
    return websocket.scope["app"].state.market_data_service


# Type aliases for route injection
MarketDataServiceDep = Annotated[MarketDataService, Depends(get_market_data_service)]
MarketDataServiceWs = Annotated[MarketDataService, Depends(get_market_data_service_ws)]
