"""Finnhub market data provider, with Yahoo Finance for historical data."""
import logging
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from stock_watchlist.providers.core import (
    MarketDataProviderABC,
    NoQuoteData,
    VendorInvalidResponse,
)
from stock_watchlist.providers.core.http import fetch_json
from stock_watchlist.providers.stocks.finnhub.models import (
    DEFAULT_COUNTRY,
    DEFAULT_CURRENCY,
    DEFAULT_EXCHANGE,
    EXCHANGE_TO_COUNTRY,
    EXCHANGE_TO_CURRENCY,
    MAX_SEARCH_RESULTS,
    SEARCH_TYPES,
    SUFFIX_TO_EXCHANGE,
    FinnhubQuote,
    FinnhubSearchItem,
)
from stock_watchlist.providers.stocks.yahoo import YahooChartClient
from stock_watchlist.schemas import Candle, Quote, SearchResult, StockRef, Timeframe
from stock_watchlist.utils import parse_timestamp

logger = logging.getLogger(__name__)


def parse_exchange(display_symbol: str) -> str:
    """Infer the exchange from a dotted ticker suffix ("SHOP.TO" -> "TSX")."""
    if "." not in display_symbol:
        return DEFAULT_EXCHANGE
    suffix = display_symbol.rsplit(".", 1)[1].upper()
    return SUFFIX_TO_EXCHANGE.get(suffix) or suffix or DEFAULT_EXCHANGE


def exchange_to_country(exchange: str) -> str:
    return EXCHANGE_TO_COUNTRY.get(exchange, DEFAULT_COUNTRY)


def exchange_to_currency(exchange: str) -> str:
    return EXCHANGE_TO_CURRENCY.get(exchange, DEFAULT_CURRENCY)


class FinnhubProvider(MarketDataProviderABC):
    """Market data provider backed by the Finnhub REST API.

    Free tier: 60 calls/min, global symbol search and quotes. Candles are not
    on the free tier, so get_historical_data is served by Yahoo Finance's
    public chart endpoint instead.
    """

    name = "finnhub"
    VENDOR = "Finnhub"
    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: str,
        *,
        request_delay: float = 0.1,
        timeout: float = 10.0,
        base_url: str = BASE_URL,
        history_client: YahooChartClient | None = None,
    ) -> None:
        """Initialize the Finnhub provider.

        Args:
            api_key: Finnhub API token.
            request_delay: Seconds between calls in get_batch_quotes.
            timeout: HTTP request timeout in seconds.
            base_url: Override base URL (useful for testing).
            history_client: Yahoo chart client; one is created if omitted.
        """
        super().__init__()
        if not api_key:
            raise ValueError("Finnhub API key is required")
        self._api_key = api_key
        self._request_delay = request_delay
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._history = history_client or YahooChartClient(timeout=timeout)

    async def _get(self, path: str, **params: str) -> object:
        return await fetch_json(
            self._client,
            path,
            vendor=self.VENDOR,
            params=params | {"token": self._api_key},
        )

    async def search(self, query: str) -> list[SearchResult]:
        """Search Finnhub; keep stocks, ETPs and ADRs, at most 15 in vendor order."""
        if not query.strip():
            return []
        data = await self._get("/search", q=query.strip())
        if not isinstance(data, dict) or not data.get("result"):
            return []

        results: list[SearchResult] = []
        for raw in data["result"]:
            try:
                item = FinnhubSearchItem.model_validate(raw)
            except ValidationError:
                logger.debug("Skipping malformed Finnhub search item: %r", raw)
                continue
            if item.type not in SEARCH_TYPES:
                continue
            exchange = parse_exchange(item.displaySymbol or item.symbol)
            results.append(
                SearchResult(
                    symbol=item.symbol,
                    exchange=exchange,
                    name=item.description,
                    currency=exchange_to_currency(exchange),
                    country=exchange_to_country(exchange),
                    type="etf" if item.type == "ETP" else "stock",
                )
            )
            if len(results) == MAX_SEARCH_RESULTS:
                break
        return results

    async def get_quote(self, symbol: str, exchange: str) -> Quote:
        """Fetch /quote. A zero or missing current price means no data."""
        data = await self._get("/quote", symbol=symbol)
        if not isinstance(data, dict):
            raise VendorInvalidResponse(
                f"Unexpected Finnhub quote payload for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )
        try:
            raw = FinnhubQuote.model_validate(data)
        except ValidationError as e:
            raise VendorInvalidResponse(
                f"Malformed Finnhub quote for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            ) from e
        if not raw.c:
            raise NoQuoteData(
                f"No quote data for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )

        change = raw.d
        change_percent = raw.dp
        if change is None and raw.pc:
            change = raw.c - raw.pc
            change_percent = change / raw.pc * 100
        if change is None or change_percent is None:
            raise VendorInvalidResponse(
                f"Finnhub quote for {symbol} has no change fields",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )

        return Quote(
            symbol=symbol,
            exchange=exchange,
            price=raw.c,
            change=change,
            change_percent=change_percent,
            timestamp=parse_timestamp(raw.t),
            high=raw.h,
            low=raw.l,
            open=raw.o,
            previous_close=raw.pc,
        )

    async def get_batch_quotes(self, stocks: Sequence[StockRef]) -> dict[str, Quote]:
        """Sequential /quote calls spaced for the 60 calls/min limit."""
        return await self._fetch_quotes_sequentially(stocks, self._request_delay)

    async def get_historical_data(
        self, symbol: str, exchange: str, timeframe: Timeframe
    ) -> list[Candle]:
        """Served by the Yahoo Finance chart endpoint; exchange is not used."""
        return await self._history.get_candles(symbol, timeframe)

    async def health_check(self) -> bool:
        """Request a known-good quote; any failure is False."""
        try:
            response = await self._client.get(
                "/quote", params={"symbol": "AAPL", "token": self._api_key}
            )
            return response.is_success
        except Exception:  # pylint: disable=broad-except
            logger.debug("Finnhub health check failed", exc_info=True)
            return False

    async def close(self) -> None:
        """Close both HTTP clients."""
        await super().close()
        await self._client.aclose()
        await self._history.close()
