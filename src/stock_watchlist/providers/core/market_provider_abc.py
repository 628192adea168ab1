"""Abstract base class for market data providers."""
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from stock_watchlist.providers.core.exceptions import MarketDataError
from stock_watchlist.providers.core.utils import pause
from stock_watchlist.schemas import Candle, Quote, SearchResult, StockRef, Timeframe

logger = logging.getLogger(__name__)


class MarketDataProviderABC(ABC):
    """Base interface for all market data providers.

    Each provider implements the same five operations against its own
    upstream API: search, get_quote, get_batch_quotes, get_historical_data
    and health_check. Failures surface as MarketDataError subclasses.

    Subclasses must call super().__init__() and must not set _streaming directly;
    the streaming property is used by stream_by_polling to stop when close() is called.
    """

    name: str = "base"

    def __init__(self) -> None:
        """Initialize provider. Subclasses may override and should call super().__init__()."""
        self._streaming = False

    @property
    def streaming(self) -> bool:
        """Flag used by stream_by_polling to control the polling loop."""
        return getattr(self, "_streaming", False)

    @streaming.setter
    def streaming(self, value: bool) -> None:
        self._streaming = value

    @abstractmethod
    async def search(self, query: str) -> list[SearchResult]:
        """Search securities by symbol or company name.

        Args:
            query: Free text (e.g. "AAPL", "apple").

        Returns:
            Best-effort matches in vendor order; [] for blank input or no match.
        """

    @abstractmethod
    async def get_quote(self, symbol: str, exchange: str) -> Quote:
        """Fetch the current quote for a security.

        Args:
            symbol: Ticker (e.g. "AAPL", "SHOP.TO").
            exchange: Exchange code; echoed on the quote and used for its key.

        Raises:
            NoQuoteData: the symbol has no tradable price.
        """

    @abstractmethod
    async def get_batch_quotes(self, stocks: Sequence[StockRef]) -> dict[str, Quote]:
        """Fetch quotes for several pairs.

        Returns:
            Mapping of "symbol:exchange" to Quote. Pairs that failed are omitted.
        """

    @abstractmethod
    async def get_historical_data(
        self, symbol: str, exchange: str, timeframe: Timeframe
    ) -> list[Candle]:
        """Fetch OHLCV candles for a timeframe.

        Returns:
            Candles strictly ascending by timestamp; [] when there is no data.
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Probe the upstream. Never raises; any failure is False."""

    async def _fetch_quotes_sequentially(
        self, stocks: Sequence[StockRef], delay: float
    ) -> dict[str, Quote]:
        """Call get_quote pair by pair, sleeping ``delay`` seconds between calls."""
        quotes: dict[str, Quote] = {}
        for i, stock in enumerate(stocks):
            if i > 0:
                await pause(delay)
            try:
                quote = await self.get_quote(stock.symbol, stock.exchange)
            except MarketDataError as e:
                logger.warning(
                    "%s: omitting %s from batch: %s", self.name, stock.key, e
                )
                continue
            quotes[stock.key] = quote
        return quotes

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """
        self.streaming = False

    async def __aenter__(self) -> "MarketDataProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
