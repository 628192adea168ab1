"""Pydantic schemas shared by providers, services and routes. Not persisted."""
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _ValueModel(BaseModel):
    """Immutable value object; snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Timeframe(StrEnum):
    """Chart ranges a caller may request."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"

    @property
    def lookback(self) -> timedelta:
        """Calendar span covered by the timeframe."""
        return _LOOKBACK[self]


_LOOKBACK: dict[Timeframe, timedelta] = {
    Timeframe.ONE_DAY: timedelta(days=1),
    Timeframe.ONE_WEEK: timedelta(days=7),
    Timeframe.ONE_MONTH: timedelta(days=31),
    Timeframe.THREE_MONTHS: timedelta(days=92),
    Timeframe.ONE_YEAR: timedelta(days=366),
    Timeframe.FIVE_YEARS: timedelta(days=5 * 366),
}


def quote_key(symbol: str, exchange: str) -> str:
    """Batch result key for a symbol/exchange pair."""
    return f"{symbol}:{exchange}"


class StockRef(_ValueModel):
    """One symbol/exchange pair requested in a batch."""

    symbol: str = Field(min_length=1)
    exchange: str = Field(min_length=1)

    @property
    def key(self) -> str:
        return quote_key(self.symbol, self.exchange)


class SearchResult(_ValueModel):
    """A security matching a search query."""

    symbol: str
    exchange: str
    name: str
    currency: str
    country: str
    type: Literal["stock", "etf", "index"] | None = None


class Quote(_ValueModel):
    """Latest price snapshot for a security.

    Optional fields are None when the vendor does not report them.
    """

    symbol: str
    exchange: str
    price: float
    change: float
    change_percent: float
    timestamp: datetime = Field(default_factory=_utcnow)
    volume: int | None = None
    market_cap: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    previous_close: float | None = None

    @property
    def key(self) -> str:
        return quote_key(self.symbol, self.exchange)


class Candle(_ValueModel):
    """One OHLCV bar of a historical series."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int = Field(ge=0)

    @model_validator(mode="after")
    def high_gte_low(self) -> "Candle":
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) must be >= low ({self.low})")
        return self


class BatchQuotesRequest(_ValueModel):
    """Body of POST /stocks/quotes."""

    stocks: list[StockRef] = Field(default_factory=list)


class HealthStatus(_ValueModel):
    """Provider health as reported by GET /health."""

    status: Literal["ok", "degraded"]
    provider: str
    healthy: bool


__all__ = [
    "BatchQuotesRequest",
    "Candle",
    "HealthStatus",
    "Quote",
    "SearchResult",
    "StockRef",
    "Timeframe",
    "quote_key",
]
