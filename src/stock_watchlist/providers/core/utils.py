"""Shared utilities for market data providers."""
import asyncio
from collections.abc import Iterable

from stock_watchlist.schemas import Candle

DECIMALS = 2


def normalize_stock_symbol(symbol: str) -> str:
    """Normalize a stock symbol (strip + uppercase)."""
    return symbol.strip().upper()


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


async def pause(seconds: float) -> None:
    """Sleep between upstream calls; no-op for a zero delay."""
    if seconds > 0:
        await asyncio.sleep(seconds)


def ordered_candles(candles: Iterable[Candle]) -> list[Candle]:
    """Sort candles ascending by timestamp, keeping the last bar seen per timestamp."""
    by_ts: dict = {}
    for candle in candles:
        by_ts[candle.timestamp] = candle
    return [by_ts[ts] for ts in sorted(by_ts)]
