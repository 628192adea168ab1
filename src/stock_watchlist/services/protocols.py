"""Protocols for service-layer stream sources."""
import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from stock_watchlist.schemas import Quote, StockRef


class QuoteStreamable(Protocol):
    """Protocol for objects that can stream Quotes (e.g. MarketDataService)."""

    def stream_quotes(
        self,
        stocks: Sequence[StockRef],
        *,
        stop_event: asyncio.Event | None = None,
    ) -> AsyncIterator[Quote]:
        """Stream quotes for the given pairs until stop_event is set."""
        ...
