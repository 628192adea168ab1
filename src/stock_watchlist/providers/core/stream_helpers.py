"""Shared polling-based quote stream helper."""
import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

from stock_watchlist.providers.core.protocols import PollingStreamable
from stock_watchlist.schemas import Quote, StockRef


async def stream_by_polling(
    provider: PollingStreamable,
    stocks: Sequence[StockRef],
    poll_interval_seconds: float,
    fetch_quotes: Callable[[Sequence[StockRef]], Awaitable[dict[str, Quote]]],
    *,
    dedup_by_value: bool = True,
    stop_event: asyncio.Event | None = None,
) -> AsyncIterator[Quote]:
    """Poll at interval, fetch quotes via fetch_quotes(stocks), yield with optional dedup.

    Uses stop_event when provided (per-stream, safe for concurrent clients). When
    stop_event is None, uses provider.streaming so close() can stop the loop.

    Args:
        provider: Object implementing PollingStreamable (streaming property).
        stocks: Pairs to poll.
        poll_interval_seconds: Seconds to sleep between poll rounds.
        fetch_quotes: Async callable(stocks) -> {"symbol:exchange": Quote}, e.g.
            a provider's get_batch_quotes.
        dedup_by_value: If True, skip yielding when the price is unchanged for a key.
        stop_event: When set, the loop exits. Use one per stream to avoid stopping other clients.
    """
    if not stocks:
        return
    use_stop_event = stop_event is not None
    if not use_stop_event:
        provider.streaming = True
    last_prices: dict[str, float] = {}
    try:
        while (stop_event is not None and not stop_event.is_set()) or (
            stop_event is None and provider.streaming
        ):
            quotes = await fetch_quotes(stocks)
            for key, quote in quotes.items():
                if dedup_by_value and last_prices.get(key) == quote.price:
                    continue
                if dedup_by_value:
                    last_prices[key] = quote.price
                yield quote
            await asyncio.sleep(poll_interval_seconds)
    finally:
        if not use_stop_event:
            provider.streaming = False
