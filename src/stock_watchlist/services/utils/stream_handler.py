"""WebSocket stream handling: parse pairs and stream Quotes from a service."""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
from typing import Any

import anyio
from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from stock_watchlist.schemas import Quote, StockRef
from stock_watchlist.services.protocols import QuoteStreamable

logger = logging.getLogger(__name__)


def parse_stocks_param(query_params: Any, default_exchange: str = "US") -> list[StockRef]:
    """Parse the comma-separated 'stocks' query param ("AAPL:NASDAQ,SHOP.TO:TSX").

    A pair without ":EXCHANGE" uses default_exchange. Duplicates are dropped.
    """
    raw = (query_params.get("stocks") or "").strip()
    stocks: list[StockRef] = []
    seen: set[str] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        symbol, _, exchange = part.partition(":")
        symbol = symbol.strip().upper()
        if not symbol:
            continue
        ref = StockRef(symbol=symbol, exchange=exchange.strip() or default_exchange)
        if ref.key not in seen:
            seen.add(ref.key)
            stocks.append(ref)
    return stocks


async def _send_quotes(
    websocket: WebSocket,
    stream_source: QuoteStreamable,
    stocks: Sequence[StockRef],
    stop_event: asyncio.Event,
) -> None:
    try:
        async for quote in stream_source.stream_quotes(stocks, stop_event=stop_event):
            if isinstance(quote, Quote):
                await websocket.send_json(quote.model_dump(mode="json", by_alias=True))
    except WebSocketDisconnect:
        logger.debug("Stream client disconnected during send")


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    """Drain client messages until the client leaves."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            logger.debug("Stream client disconnected (code %s)", message.get("code", 1000))
            return


async def _stream_until_disconnect(
    websocket: WebSocket,
    stream_source: QuoteStreamable,
    stocks: Sequence[StockRef],
    stop_event: asyncio.Event,
) -> None:
    """Send quotes while watching the client; whichever side finishes first ends both.

    The stream sleeps between polls, so the watcher is what notices a
    disconnect promptly.
    """
    async with anyio.create_task_group() as task_group:

        async def run_then_cancel(func: Callable[[], Awaitable[None]]) -> None:
            await func()
            task_group.cancel_scope.cancel()

        task_group.start_soon(
            run_then_cancel, partial(_send_quotes, websocket, stream_source, stocks, stop_event)
        )
        await run_then_cancel(partial(_wait_for_disconnect, websocket))


async def handle_websocket_stream(
    websocket: WebSocket,
    stream_source: QuoteStreamable,
    stocks: Sequence[StockRef],
    stocks_required_message: str,
) -> None:
    """Accept WebSocket, validate pairs, then stream Quotes as camelCase JSON.

    Uses a per-connection stop_event so one client disconnect does not stop
    other clients (safe with the singleton provider). When the stream itself
    ends, the socket is closed with 1000.
    """
    await websocket.accept()
    if not stocks:
        await websocket.close(code=4000, reason=stocks_required_message)
        return
    stop_event: asyncio.Event = asyncio.Event()
    try:
        await _stream_until_disconnect(websocket, stream_source, stocks, stop_event)
        if (
            websocket.client_state == WebSocketState.CONNECTED
            and websocket.application_state == WebSocketState.CONNECTED
        ):
            await websocket.close(code=1000)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Stream error: %s", exc)
        try:
            await websocket.close(code=1011, reason="Stream error")
        except RuntimeError:
            logger.debug("WebSocket already closed")
    finally:
        stop_event.set()
