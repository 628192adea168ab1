"""Alpha Vantage market data provider.

Docs: https://www.alphavantage.co/documentation/

Every operation is a GET on /query with a ``function`` parameter. Alpha
Vantage reports rate limiting and bad input inside a 200 body, so each
response is checked for those fields before it is parsed.
"""
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from pydantic import ValidationError

from stock_watchlist.providers.core import (
    MarketDataError,
    MarketDataProviderABC,
    NoQuoteData,
    VendorInvalidResponse,
    VendorRateLimited,
    ordered_candles,
)
from stock_watchlist.providers.core.http import fetch_json
from stock_watchlist.providers.stocks.alpha_vantage.models import (
    DEFAULT_SERIES_FUNCTION,
    DEFAULT_TIMEZONE,
    ERROR_FIELD,
    GLOBAL_QUOTE_KEY,
    INTRADAY_INTERVAL,
    RATE_LIMIT_FIELDS,
    SEARCH_TYPES,
    TIME_SERIES_MARKER,
    TIMEFRAME_FUNCTIONS,
    GlobalQuoteParams,
    SymbolSearchParams,
    TimeSeriesParams,
)
from stock_watchlist.schemas import Candle, Quote, SearchResult, StockRef, Timeframe

logger = logging.getLogger(__name__)


def _to_float(value: Any) -> float | None:
    """Parse a numeric string field; None when absent or unparsable."""
    if value is None:
        return None
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        return None


def _to_int(value: Any) -> int | None:
    number = _to_float(value)
    return int(number) if number is not None else None


def _field(row: dict[str, Any], name: str) -> Any:
    """Look up a numbered field by its name part ("05. price" for "price")."""
    for key, value in row.items():
        if key.split(". ", 1)[-1] == name:
            return value
    return None


class AlphaVantageProvider(MarketDataProviderABC):
    """Market data provider backed by Alpha Vantage.

    No batch endpoint: get_batch_quotes issues one GLOBAL_QUOTE per pair,
    200 ms apart.
    """

    name = "alpha_vantage"
    VENDOR = "Alpha Vantage"
    BASE_URL = "https://www.alphavantage.co"
    QUERY_PATH = "/query"

    def __init__(
        self,
        api_key: str,
        *,
        request_delay: float = 0.2,
        timeout: float = 10.0,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize the Alpha Vantage provider.

        Args:
            api_key: Alpha Vantage API key.
            request_delay: Seconds between calls in get_batch_quotes.
            timeout: HTTP request timeout in seconds.
            base_url: Override base URL (useful for testing).
        """
        super().__init__()
        if not api_key:
            raise ValueError("Alpha Vantage API key is required")
        self._api_key = api_key
        self._request_delay = request_delay
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def _query(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET /query and raise on the in-body error fields."""
        params = {k: v for k, v in params.items() if v is not None}
        data = await fetch_json(
            self._client,
            self.QUERY_PATH,
            vendor=self.VENDOR,
            params=params | {"apikey": self._api_key},
        )
        if not isinstance(data, dict):
            raise VendorInvalidResponse(
                f"Unexpected Alpha Vantage payload for {params.get('function')}",
                vendor=self.VENDOR,
            )
        for field in RATE_LIMIT_FIELDS:
            if data.get(field):
                raise VendorRateLimited(
                    str(data[field]),
                    vendor=self.VENDOR,
                    context={"function": params.get("function")},
                )
        if data.get(ERROR_FIELD):
            raise VendorInvalidResponse(
                str(data[ERROR_FIELD]),
                vendor=self.VENDOR,
                context={"function": params.get("function"), "vendor_message": data[ERROR_FIELD]},
            )
        return data

    async def search(self, query: str) -> list[SearchResult]:
        """SYMBOL_SEARCH, vendor relevance order, unfiltered."""
        if not query.strip():
            return []
        data = await self._query(SymbolSearchParams(keywords=query.strip()).model_dump())

        results: list[SearchResult] = []
        for match in data.get("bestMatches") or []:
            symbol = _field(match, "symbol")
            if not symbol:
                continue
            region = _field(match, "region") or "US"
            raw_type = (_field(match, "type") or "").lower()
            results.append(
                SearchResult(
                    symbol=symbol,
                    exchange=region,
                    name=_field(match, "name") or symbol,
                    currency=_field(match, "currency") or "USD",
                    country=region,
                    type=SEARCH_TYPES.get(raw_type),
                )
            )
        return results

    async def get_quote(self, symbol: str, exchange: str) -> Quote:
        """GLOBAL_QUOTE. Alpha Vantage answers unknown symbols with an empty object."""
        data = await self._query(GlobalQuoteParams(symbol=symbol).model_dump())
        if GLOBAL_QUOTE_KEY not in data:
            raise VendorInvalidResponse(
                f"No '{GLOBAL_QUOTE_KEY}' in Alpha Vantage response for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )

        row = data[GLOBAL_QUOTE_KEY] or {}
        price = _to_float(_field(row, "price"))
        if not price:
            raise NoQuoteData(
                f"No quote data found for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )

        previous_close = _to_float(_field(row, "previous close"))
        change = _to_float(_field(row, "change"))
        change_percent = _to_float(_field(row, "change percent"))
        if change is None and previous_close:
            change = price - previous_close
        if change_percent is None and change is not None and previous_close:
            change_percent = change / previous_close * 100
        if change is None or change_percent is None:
            raise VendorInvalidResponse(
                f"Alpha Vantage quote for {symbol} has no change fields",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )

        return Quote(
            symbol=symbol,
            exchange=exchange,
            price=price,
            change=change,
            change_percent=change_percent,
            timestamp=datetime.now(timezone.utc),
            volume=_to_int(_field(row, "volume")),
            high=_to_float(_field(row, "high")),
            low=_to_float(_field(row, "low")),
            open=_to_float(_field(row, "open")),
            previous_close=previous_close,
        )

    async def get_batch_quotes(self, stocks: Sequence[StockRef]) -> dict[str, Quote]:
        """Sequential GLOBAL_QUOTE calls, request_delay apart."""
        return await self._fetch_quotes_sequentially(stocks, self._request_delay)

    async def get_historical_data(
        self, symbol: str, exchange: str, timeframe: Timeframe
    ) -> list[Candle]:
        """TIME_SERIES_* by timeframe, ascending and trimmed to the timeframe's span."""
        function = TIMEFRAME_FUNCTIONS.get(timeframe)
        if function is None:
            logger.warning(
                "No Alpha Vantage series for timeframe %r, using %s",
                timeframe,
                DEFAULT_SERIES_FUNCTION,
            )
            function = DEFAULT_SERIES_FUNCTION

        params = TimeSeriesParams(
            function=function,
            symbol=symbol,
            interval=INTRADAY_INTERVAL if function == "TIME_SERIES_INTRADAY" else None,
        )
        data = await self._query(params.model_dump())

        series_key = next((k for k in data if TIME_SERIES_MARKER in k), None)
        if series_key is None:
            raise VendorInvalidResponse(
                f"No time series data found for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol, "function": function},
            )

        tz = self._series_timezone(data.get("Meta Data") or {})
        candles = ordered_candles(
            candle
            for ts, row in (data[series_key] or {}).items()
            if (candle := self._candle_from_row(ts, row, tz)) is not None
        )

        if candles and isinstance(timeframe, Timeframe):
            cutoff = candles[-1].timestamp - timeframe.lookback
            candles = [c for c in candles if c.timestamp >= cutoff]
        return candles

    async def health_check(self) -> bool:
        """Request a known-good quote; any failure, including an in-body Note, is False."""
        try:
            await self._query(GlobalQuoteParams(symbol="AAPL").model_dump())
            return True
        except MarketDataError:
            logger.debug("Alpha Vantage health check failed", exc_info=True)
            return False

    async def close(self) -> None:
        """Close the HTTP client."""
        await super().close()
        await self._client.aclose()

    @staticmethod
    def _series_timezone(meta: dict[str, Any]) -> ZoneInfo | timezone:
        """Time zone of the series rows, from the "Time Zone" metadata entry."""
        name = _field(meta, "Time Zone") or DEFAULT_TIMEZONE
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown Alpha Vantage time zone %r, assuming UTC", name)
            return timezone.utc

    @staticmethod
    def _candle_from_row(
        ts: str, row: dict[str, Any], tz: ZoneInfo | timezone
    ) -> Candle | None:
        """Build a candle from one series row; None for a malformed row."""
        try:
            timestamp = datetime.fromisoformat(ts).replace(tzinfo=tz).astimezone(timezone.utc)
        except ValueError:
            logger.debug("Dropping Alpha Vantage row with bad timestamp %r", ts)
            return None

        values = [_to_float(_field(row, name)) for name in ("open", "high", "low", "close")]
        volume = _to_int(_field(row, "volume"))
        if volume is None or any(v is None for v in values):
            logger.debug("Dropping incomplete Alpha Vantage row %s", ts)
            return None

        o, h, lo, c = values
        try:
            return Candle(timestamp=timestamp, open=o, high=h, low=lo, close=c, volume=volume)
        except ValidationError as e:
            logger.debug("Dropping malformed Alpha Vantage row %s: %s", ts, e)
            return None
