"""Static catalog and simulation constants for the mock provider."""
from datetime import timedelta

from stock_watchlist.schemas import SearchResult, Timeframe

MOCK_STOCKS: tuple[SearchResult, ...] = (
    SearchResult(symbol="AAPL", exchange="NASDAQ", name="Apple Inc.", currency="USD", country="US", type="stock"),
    SearchResult(symbol="TSLA", exchange="NASDAQ", name="Tesla, Inc.", currency="USD", country="US", type="stock"),
    SearchResult(symbol="GOOGL", exchange="NASDAQ", name="Alphabet Inc.", currency="USD", country="US", type="stock"),
    SearchResult(
        symbol="TSM",
        exchange="NYSE",
        name="Taiwan Semiconductor Manufacturing",
        currency="USD",
        country="TW",
        type="stock",
    ),
    SearchResult(symbol="ASML", exchange="NASDAQ", name="ASML Holding N.V.", currency="USD", country="NL", type="stock"),
    SearchResult(symbol="SAP", exchange="XETRA", name="SAP SE", currency="EUR", country="DE", type="stock"),
    SearchResult(symbol="NVDA", exchange="NASDAQ", name="NVIDIA Corporation", currency="USD", country="US", type="stock"),
    SearchResult(
        symbol="MSFT", exchange="NASDAQ", name="Microsoft Corporation", currency="USD", country="US", type="stock"
    ),
)

BASE_PRICES: dict[str, float] = {
    "AAPL": 175.0,
    "TSLA": 250.0,
    "GOOGL": 140.0,
    "TSM": 100.0,
    "ASML": 750.0,
    "SAP": 150.0,
    "NVDA": 500.0,
    "MSFT": 380.0,
}
DEFAULT_BASE_PRICE = 100.0

# Largest absolute quote move away from the base price.
MAX_QUOTE_CHANGE = 10.0

# Simulated latency in seconds.
SEARCH_DELAY = 0.3
QUOTE_DELAY = 0.2
BATCH_DELAY = 0.5
HISTORY_DELAY = 0.4

# (bar count, bar spacing) per timeframe, sized to plausible trading periods.
CANDLE_SERIES: dict[Timeframe, tuple[int, timedelta]] = {
    Timeframe.ONE_DAY: (78, timedelta(minutes=5)),  # 6.5 trading hours of 5-min bars
    Timeframe.ONE_WEEK: (5, timedelta(days=1)),
    Timeframe.ONE_MONTH: (21, timedelta(days=1)),
    Timeframe.THREE_MONTHS: (63, timedelta(days=1)),
    Timeframe.ONE_YEAR: (252, timedelta(days=1)),
    Timeframe.FIVE_YEARS: (60, timedelta(days=30)),  # monthly bars
}
DEFAULT_CANDLE_SERIES = (30, timedelta(days=1))
