"""Static tables and response models for the Finnhub provider."""
from pydantic import BaseModel, ConfigDict

SEARCH_TYPES = frozenset({"Common Stock", "ETP", "ADR"})
MAX_SEARCH_RESULTS = 15

DEFAULT_EXCHANGE = "US"
DEFAULT_COUNTRY = "US"
DEFAULT_CURRENCY = "USD"

# Ticker suffix after the last dot (e.g. "SHOP.TO") -> exchange code.
SUFFIX_TO_EXCHANGE: dict[str, str] = {
    "TO": "TSX",
    "V": "TSXV",
    "L": "LSE",
    "AS": "AMS",
    "PA": "EPA",
    "DE": "XETRA",
    "F": "FRA",
    "MI": "BIT",
    "MC": "BME",
    "SW": "SIX",
    "HK": "HKEX",
    "T": "TSE",
    "SS": "SSE",
    "SZ": "SZSE",
    "AX": "ASX",
    "NS": "NSE",
    "BO": "BSE",
    "SA": "B3",
    "KS": "KRX",
    "TW": "TWSE",
}

EXCHANGE_TO_COUNTRY: dict[str, str] = {
    "US": "US", "NASDAQ": "US", "NYSE": "US",
    "TSX": "CA", "TSXV": "CA",
    "LSE": "GB",
    "AMS": "NL", "EPA": "FR", "XETRA": "DE", "FRA": "DE",
    "BIT": "IT", "BME": "ES", "SIX": "CH",
    "HKEX": "HK", "TSE": "JP", "SSE": "CN", "SZSE": "CN",
    "ASX": "AU", "NSE": "IN", "BSE": "IN",
    "B3": "BR", "KRX": "KR", "TWSE": "TW",
}  # fmt: skip

EXCHANGE_TO_CURRENCY: dict[str, str] = {
    "US": "USD", "NASDAQ": "USD", "NYSE": "USD",
    "TSX": "CAD", "TSXV": "CAD",
    "LSE": "GBP",
    "AMS": "EUR", "EPA": "EUR", "XETRA": "EUR", "FRA": "EUR",
    "BIT": "EUR", "BME": "EUR",
    "SIX": "CHF",
    "HKEX": "HKD", "TSE": "JPY", "SSE": "CNY", "SZSE": "CNY",
    "ASX": "AUD", "NSE": "INR", "BSE": "INR",
    "B3": "BRL", "KRX": "KRW", "TWSE": "TWD",
}  # fmt: skip


class FinnhubQuote(BaseModel):
    """Body of GET /quote. Finnhub answers unknown symbols with zeros."""

    model_config = ConfigDict(extra="ignore")

    c: float | None = None  # current price
    d: float | None = None  # change
    dp: float | None = None  # change percent
    h: float | None = None
    l: float | None = None  # noqa: E741
    o: float | None = None
    pc: float | None = None  # previous close
    t: int | None = None  # epoch seconds


class FinnhubSearchItem(BaseModel):
    """One entry of GET /search ``result``."""

    model_config = ConfigDict(extra="ignore")

    symbol: str
    description: str = ""
    displaySymbol: str = ""
    type: str = ""
