"""Request parameters for the Yahoo Finance chart endpoint."""
from pydantic import BaseModel

from stock_watchlist.schemas import Timeframe


class YahooChartParams(BaseModel):
    """Query params for /v8/finance/chart/{symbol}."""

    range: str
    interval: str


YAHOO_CHART_PARAMS: dict[Timeframe, YahooChartParams] = {
    Timeframe.ONE_DAY: YahooChartParams(range="1d", interval="5m"),
    Timeframe.ONE_WEEK: YahooChartParams(range="5d", interval="15m"),
    Timeframe.ONE_MONTH: YahooChartParams(range="1mo", interval="1d"),
    Timeframe.THREE_MONTHS: YahooChartParams(range="3mo", interval="1d"),
    Timeframe.ONE_YEAR: YahooChartParams(range="1y", interval="1wk"),
    Timeframe.FIVE_YEARS: YahooChartParams(range="5y", interval="1mo"),
}
DEFAULT_YAHOO_CHART_PARAMS = YahooChartParams(range="1mo", interval="1d")
