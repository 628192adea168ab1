"""Yahoo Finance chart client used as the historical-data fallback.

Uses the unauthenticated ``/v8/finance/chart/{symbol}`` endpoint with a
``range``/``interval`` pair instead of explicit dates.
"""
import logging
from typing import Any
from urllib.parse import quote as url_quote

import httpx
from pydantic import ValidationError

from stock_watchlist.providers.core.exceptions import VendorInvalidResponse
from stock_watchlist.providers.core.http import fetch_json
from stock_watchlist.providers.core.utils import ordered_candles
from stock_watchlist.providers.stocks.yahoo.models import (
    DEFAULT_YAHOO_CHART_PARAMS,
    YAHOO_CHART_PARAMS,
)
from stock_watchlist.schemas import Candle, Timeframe
from stock_watchlist.utils import parse_timestamp

logger = logging.getLogger(__name__)


class YahooChartClient:
    """Fetches OHLCV candles from Yahoo Finance's chart API."""

    VENDOR = "Yahoo Finance"
    BASE_URL = "https://query1.finance.yahoo.com"
    CHART_PATH = "/v8/finance/chart"
    # The chart API rejects requests without a browser-like agent.
    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    def __init__(self, timeout: float = 10.0, base_url: str = BASE_URL) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"User-Agent": self.USER_AGENT, "Accept": "application/json"},
        )

    async def get_candles(self, symbol: str, timeframe: Timeframe) -> list[Candle]:
        """Fetch candles for ``symbol`` over ``timeframe``; [] if Yahoo has none."""
        params = YAHOO_CHART_PARAMS.get(timeframe)
        if params is None:
            logger.warning(
                "No Yahoo chart mapping for timeframe %r, using %s",
                timeframe,
                DEFAULT_YAHOO_CHART_PARAMS,
            )
            params = DEFAULT_YAHOO_CHART_PARAMS

        data = await fetch_json(
            self._client,
            f"{self.CHART_PATH}/{url_quote(symbol, safe='')}",
            vendor=self.VENDOR,
            params=params.model_dump(),
            not_found_ok=True,
        )
        if data is None:
            logger.info("Yahoo Finance has no chart for %s", symbol)
            return []

        chart = data.get("chart") if isinstance(data, dict) else None
        if not isinstance(chart, dict):
            raise VendorInvalidResponse(
                f"Unexpected Yahoo Finance chart payload for {symbol}",
                vendor=self.VENDOR,
                context={"symbol": symbol},
            )
        if chart.get("error"):
            err = chart["error"]
            if isinstance(err, dict):
                err = f"{err.get('code')} {err.get('description')}"
            logger.warning("Yahoo Finance chart error for %s: %s", symbol, err)
            return []

        results = chart.get("result") or []
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            return []
        return self.adapt(results[0])

    @staticmethod
    def adapt(raw: dict[str, Any]) -> list[Candle]:
        """Turn a ``chart.result[0]`` object into ascending candles.

        Rows with a null field (holidays, halted sessions) are dropped.
        """
        timestamps: list[int] = raw.get("timestamp") or []
        quote_rows = (raw.get("indicators") or {}).get("quote") or [{}]
        quote = quote_rows[0] or {}

        columns = [quote.get(k) or [] for k in ("open", "high", "low", "close", "volume")]
        candles: list[Candle] = []
        for i, ts in enumerate(timestamps):
            values = [col[i] if i < len(col) else None for col in columns]
            if ts is None or any(v is None for v in values):
                continue
            o, h, lo, c, v = values
            try:
                candles.append(
                    Candle(
                        timestamp=parse_timestamp(ts),
                        open=o,
                        high=h,
                        low=lo,
                        close=c,
                        volume=int(v),
                    )
                )
            except (ValidationError, TypeError, ValueError) as e:
                logger.debug("Dropping malformed Yahoo row %s: %s", ts, e)
        return ordered_candles(candles)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
