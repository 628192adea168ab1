"""Stock watchlist routes: search, quotes, history and a polling quote stream.

Handlers only call MarketDataService; the service maps provider errors to HTTP.
"""
from fastapi import APIRouter, Query, WebSocket

from stock_watchlist.deps import MarketDataServiceDep, MarketDataServiceWs
from stock_watchlist.schemas import (
    BatchQuotesRequest,
    Candle,
    Quote,
    SearchResult,
    Timeframe,
)

router = APIRouter(prefix="/stocks", tags=["stocks"])

STOCKS_REQUIRED = "Query param 'stocks' required (e.g. ?stocks=AAPL:NASDAQ,SHOP.TO:TSX)"


@router.get("/search", response_model=list[SearchResult])
async def search_stocks(
    service: MarketDataServiceDep,
    q: str = Query(default="", description="Symbol or company name"),
) -> list[SearchResult]:
    """Search securities by symbol or name. Upstream failures return []."""
    return await service.search(q)


@router.post("/quotes", response_model=dict[str, Quote])
async def get_batch_quotes(
    body: BatchQuotesRequest,
    service: MarketDataServiceDep,
) -> dict[str, Quote]:
    """Get quotes for several pairs, keyed by "SYMBOL:EXCHANGE".

    Pairs the provider could not quote are absent from the result.
    """
    return await service.get_batch_quotes(body.stocks)


@router.websocket("/stream")
async def stream_quotes(websocket: WebSocket, service: MarketDataServiceWs) -> None:
    """Stream quotes over WebSocket by polling batch quotes.

    Pass pairs as query param: /stocks/stream?stocks=AAPL:NASDAQ,MSFT:NASDAQ
    Each message is a Quote JSON; unchanged prices are not resent.
    """
    await service.handle_websocket_stream(websocket, STOCKS_REQUIRED)


@router.get("/{symbol}", response_model=Quote)
async def get_stock_quote(
    symbol: str,
    service: MarketDataServiceDep,
    exchange: str = Query(default="US", description="Exchange code (e.g. NASDAQ, TSX)"),
) -> Quote:
    """Get the current quote for a stock.

    Args:
        symbol: Ticker (e.g. "AAPL", "SHOP.TO").
        exchange: Exchange code echoed on the quote.
    """
    return await service.get_quote(symbol, exchange)


@router.get("/{symbol}/history", response_model=list[Candle])
async def get_stock_history(
    symbol: str,
    service: MarketDataServiceDep,
    exchange: str = Query(default="US", description="Exchange code"),
    timeframe: str = Query(
        default=Timeframe.ONE_MONTH.value,
        description="One of 1D, 1W, 1M, 3M, 1Y, 5Y",
    ),
) -> list[Candle]:
    """Get OHLCV candles for a stock, oldest first.

    An unknown timeframe is rejected with 400.
    """
    return await service.get_historical_data(symbol, exchange, timeframe)
