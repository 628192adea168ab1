"""Market data service: the consuming layer over the selected provider.

MarketDataService wraps a MarketDataProviderABC with symbol normalization and
error mapping, so routes and tools get either a result or an HTTPException.
"""
import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

from fastapi import WebSocket

from stock_watchlist.providers.core import (
    MarketDataError,
    MarketDataProviderABC,
    ProviderErrorMapper,
    UnsupportedTimeframe,
)
from stock_watchlist.providers.core.stream_helpers import stream_by_polling
from stock_watchlist.providers.core.utils import normalize_stock_symbol
from stock_watchlist.schemas import (
    Candle,
    HealthStatus,
    Quote,
    SearchResult,
    StockRef,
    Timeframe,
)
from stock_watchlist.services.utils import handle_websocket_stream, parse_stocks_param

logger = logging.getLogger(__name__)

# Exceptions from providers we map to HTTP; all others propagate (e.g. bugs, BaseException).
_PROVIDER_EXCEPTIONS: tuple[type[Exception], ...] = (
    MarketDataError,
    TimeoutError,
    asyncio.TimeoutError,
)


def to_timeframe(value: Timeframe | str) -> Timeframe:
    """Coerce a caller-supplied timeframe; raises UnsupportedTimeframe."""
    try:
        return Timeframe(value)
    except ValueError as e:
        allowed = ", ".join(t.value for t in Timeframe)
        raise UnsupportedTimeframe(
            f"Unsupported timeframe '{value}'. Use one of: {allowed}",
            context={"timeframe": value},
        ) from e


class MarketDataService:
    """Thin service over the market data provider; maps provider errors to HTTP."""

    def __init__(
        self,
        provider: MarketDataProviderABC,
        error_mapper: ProviderErrorMapper,
        *,
        stream_poll_interval: float = 30.0,
    ) -> None:
        """Initialize with provider and error mapping config.

        Args:
            provider: The selected market data provider.
            error_mapper: Maps provider exceptions to HTTP.
            stream_poll_interval: Seconds between batch polls in stream_quotes.
        """
        self._provider = provider
        self._error_mapper = error_mapper
        self._stream_poll_interval = stream_poll_interval

    @property
    def provider(self) -> MarketDataProviderABC:
        return self._provider

    async def search(self, query: str) -> list[SearchResult]:
        """Search securities. Provider failures degrade to an empty list."""
        try:
            return await self._provider.search(query)
        except _PROVIDER_EXCEPTIONS as e:
            logger.warning("Search for %r failed on %s: %s", query, self._provider.name, e)
            return []

    async def get_quote(self, symbol: str, exchange: str) -> Quote:
        """Get the current quote. Raises HTTPException on provider errors."""
        norm = normalize_stock_symbol(symbol)
        try:
            return await self._provider.get_quote(norm, exchange.strip())
        except _PROVIDER_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, symbol=norm)

    async def get_batch_quotes(self, stocks: Sequence[StockRef]) -> dict[str, Quote]:
        """Get quotes keyed by "symbol:exchange"; failed pairs are absent."""
        try:
            return await self._provider.get_batch_quotes(stocks)
        except _PROVIDER_EXCEPTIONS as e:
            self._error_mapper.raise_http(e)

    async def get_historical_data(
        self, symbol: str, exchange: str, timeframe: Timeframe | str
    ) -> list[Candle]:
        """Get ascending candles. Raises HTTPException on provider errors."""
        norm = normalize_stock_symbol(symbol)
        try:
            return await self._provider.get_historical_data(
                norm, exchange.strip(), to_timeframe(timeframe)
            )
        except _PROVIDER_EXCEPTIONS as e:
            self._error_mapper.raise_http(e, symbol=norm)

    async def health_check(self) -> HealthStatus:
        """Report provider health."""
        healthy = await self._provider.health_check()
        return HealthStatus(
            status="ok" if healthy else "degraded",
            provider=self._provider.name,
            healthy=healthy,
        )

    async def stream_quotes(
        self,
        stocks: Sequence[StockRef],
        *,
        stop_event: asyncio.Event | None = None,
    ) -> AsyncIterator[Quote]:
        """Poll batch quotes every stream_poll_interval seconds; yield changed prices.

        Pass stop_event when streaming over WebSocket so one client disconnect
        does not stop other clients (per-stream cancellation).
        """
        async for quote in stream_by_polling(
            self._provider,
            stocks,
            self._stream_poll_interval,
            self._provider.get_batch_quotes,
            dedup_by_value=True,
            stop_event=stop_event,
        ):
            yield quote

    async def handle_websocket_stream(
        self, websocket: WebSocket, stocks_required_message: str
    ) -> None:
        """Accept WebSocket, parse pairs from query params, and stream quotes."""
        stocks = parse_stocks_param(websocket.query_params)
        await handle_websocket_stream(websocket, self, stocks, stocks_required_message)

    async def close(self) -> None:
        """Close the provider. Call from app lifespan shutdown."""
        try:
            await self._provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", self._provider.name, exc)
