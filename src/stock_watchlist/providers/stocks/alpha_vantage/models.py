"""Alpha Vantage request parameters and response field names."""
from typing import Literal

from pydantic import BaseModel

from stock_watchlist.schemas import Timeframe

# Body fields Alpha Vantage uses to report problems on an HTTP 200.
RATE_LIMIT_FIELDS = ("Note", "Information")
ERROR_FIELD = "Error Message"

GLOBAL_QUOTE_KEY = "Global Quote"
TIME_SERIES_MARKER = "Time Series"

INTRADAY_INTERVAL = "5min"
DEFAULT_TIMEZONE = "America/New_York"

SeriesFunction = Literal[
    "TIME_SERIES_INTRADAY",
    "TIME_SERIES_DAILY",
    "TIME_SERIES_WEEKLY",
]

TIMEFRAME_FUNCTIONS: dict[Timeframe, SeriesFunction] = {
    Timeframe.ONE_DAY: "TIME_SERIES_INTRADAY",
    Timeframe.ONE_WEEK: "TIME_SERIES_DAILY",
    Timeframe.ONE_MONTH: "TIME_SERIES_DAILY",
    Timeframe.THREE_MONTHS: "TIME_SERIES_WEEKLY",
    Timeframe.ONE_YEAR: "TIME_SERIES_WEEKLY",
    Timeframe.FIVE_YEARS: "TIME_SERIES_WEEKLY",
}
DEFAULT_SERIES_FUNCTION: SeriesFunction = "TIME_SERIES_DAILY"

# SYMBOL_SEARCH "3. type" -> SearchResult.type
SEARCH_TYPES: dict[str, Literal["stock", "etf", "index"]] = {
    "equity": "stock",
    "etf": "etf",
    "index": "index",
}


class SymbolSearchParams(BaseModel):
    """Params for function=SYMBOL_SEARCH. Merge with 'apikey' at call site."""

    function: str = "SYMBOL_SEARCH"
    keywords: str


class GlobalQuoteParams(BaseModel):
    """Params for function=GLOBAL_QUOTE."""

    function: str = "GLOBAL_QUOTE"
    symbol: str


class TimeSeriesParams(BaseModel):
    """Params for the TIME_SERIES_* functions; interval only for intraday."""

    function: SeriesFunction
    symbol: str
    interval: str | None = None
