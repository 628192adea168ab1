"""Mock market data provider for development and tests."""
import asyncio
import logging
import random
from collections.abc import Sequence
from datetime import datetime, timezone

from stock_watchlist.providers.core import MarketDataProviderABC, round2
from stock_watchlist.providers.core.utils import normalize_stock_symbol
from stock_watchlist.providers.stocks.mock.models import (
    BASE_PRICES,
    BATCH_DELAY,
    CANDLE_SERIES,
    DEFAULT_BASE_PRICE,
    DEFAULT_CANDLE_SERIES,
    HISTORY_DELAY,
    MAX_QUOTE_CHANGE,
    MOCK_STOCKS,
    QUOTE_DELAY,
    SEARCH_DELAY,
)
from stock_watchlist.schemas import Candle, Quote, SearchResult, StockRef, Timeframe

logger = logging.getLogger(__name__)


class MockProvider(MarketDataProviderABC):
    """Market data provider returning realistic-looking random data.

    Needs no API key. Each call sleeps for a fixed delay so callers exercise
    their loading states; pass simulate_latency=False to skip the delays.
    """

    name = "mock"

    def __init__(
        self,
        simulate_latency: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the mock provider.

        Args:
            simulate_latency: Sleep before answering, like a network call would.
            rng: Random generator; pass a seeded one for reproducible values.
        """
        super().__init__()
        self._simulate_latency = simulate_latency
        self._rng = rng or random.Random()

    async def _delay(self, seconds: float) -> None:
        if self._simulate_latency:
            await asyncio.sleep(seconds)

    @staticmethod
    def base_price(symbol: str) -> float:
        """Reference price a symbol's quotes and candles are generated around."""
        return BASE_PRICES.get(normalize_stock_symbol(symbol), DEFAULT_BASE_PRICE)

    async def search(self, query: str) -> list[SearchResult]:
        """Match the static catalog by symbol or name substring, in catalog order."""
        await self._delay(SEARCH_DELAY)
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            stock
            for stock in MOCK_STOCKS
            if needle in stock.symbol.lower() or needle in stock.name.lower()
        ]

    async def get_quote(self, symbol: str, exchange: str) -> Quote:
        """Random quote within MAX_QUOTE_CHANGE of the symbol's base price."""
        await self._delay(QUOTE_DELAY)
        rng = self._rng
        base = self.base_price(symbol)
        change = (rng.random() - 0.5) * 2 * MAX_QUOTE_CHANGE
        return Quote(
            symbol=symbol,
            exchange=exchange,
            price=round2(base + change),
            change=round2(change),
            change_percent=round2(change / base * 100),
            timestamp=datetime.now(timezone.utc),
            volume=rng.randrange(100_000_000),
            market_cap=round2(base * 1_000_000_000 + rng.random() * 500_000_000_000),
            high=round2(base + abs(change) + rng.random() * 5),
            low=round2(base - abs(change) - rng.random() * 5),
            open=round2(base + (rng.random() - 0.5) * 10),
            previous_close=base,
        )

    async def get_batch_quotes(self, stocks: Sequence[StockRef]) -> dict[str, Quote]:
        """One batch delay, then a quote per pair (each with its own delay)."""
        await self._delay(BATCH_DELAY)
        return await self._fetch_quotes_sequentially(stocks, delay=0)

    async def get_historical_data(
        self, symbol: str, exchange: str, timeframe: Timeframe
    ) -> list[Candle]:
        """Random candles ending now, bar count and spacing chosen by timeframe."""
        await self._delay(HISTORY_DELAY)
        series = CANDLE_SERIES.get(timeframe)
        if series is None:
            logger.warning("No mock series for timeframe %r, using default", timeframe)
            series = DEFAULT_CANDLE_SERIES
        periods, step = series
        base = self.base_price(symbol)
        rng = self._rng

        now = datetime.now(timezone.utc)
        if step.days:
            end = now.replace(hour=0, minute=0, second=0, microsecond=0)
        else:
            end = now.replace(minute=now.minute - now.minute % 5, second=0, microsecond=0)

        candles: list[Candle] = []
        for i in range(periods - 1, -1, -1):
            open_ = base + (rng.random() - 0.5) * base * 0.1
            close = open_ + (rng.random() - 0.5) * open_ * 0.05
            high = max(open_, close) + rng.random() * open_ * 0.02
            low = min(open_, close) - rng.random() * open_ * 0.02
            candles.append(
                Candle(
                    timestamp=end - step * i,
                    open=round2(open_),
                    high=round2(high),
                    low=round2(low),
                    close=round2(close),
                    volume=rng.randrange(100_000_000),
                )
            )
        return candles

    async def health_check(self) -> bool:
        """Always healthy."""
        return True
