"""Shared utilities for the watchlist market data service."""

from datetime import datetime, timezone


def parse_timestamp(ts: float | None) -> datetime:
    """Convert optional Unix timestamp (seconds) to aware UTC datetime; fallback to now.

    Zero is treated as missing (vendors send 0 for "no observation").
    """
    if not ts:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(ts, tz=timezone.utc)
