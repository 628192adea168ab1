"""Tests for the mock market data provider."""

import random
from datetime import timedelta

import pytest

from stock_watchlist.providers import MockProvider
from stock_watchlist.providers.core.market_provider_abc import MarketDataProviderABC
from stock_watchlist.providers.stocks.mock.models import BASE_PRICES, MAX_QUOTE_CHANGE, MOCK_STOCKS
from stock_watchlist.schemas import StockRef, Timeframe


class TestSearch:
    async def test_matches_symbol(self, mock_provider):
        results = await mock_provider.search("AAPL")
        assert [r.symbol for r in results] == ["AAPL"]

    async def test_matches_name_case_insensitive(self, mock_provider):
        results = await mock_provider.search("micro")
        assert [r.symbol for r in results] == ["MSFT"]

    async def test_substring_keeps_catalog_order(self, mock_provider):
        # "a" appears in most names; order follows the catalog.
        results = await mock_provider.search("a")
        catalog = [s.symbol for s in MOCK_STOCKS]
        symbols = [r.symbol for r in results]
        assert symbols == [s for s in catalog if s in symbols]

    async def test_blank_query_returns_empty(self, mock_provider):
        assert await mock_provider.search("   ") == []

    async def test_no_match(self, mock_provider):
        assert await mock_provider.search("zzzz") == []


class TestGetQuote:
    async def test_quote_around_base_price(self, mock_provider):
        quote = await mock_provider.get_quote("AAPL", "NASDAQ")
        assert quote.symbol == "AAPL"
        assert quote.exchange == "NASDAQ"
        assert quote.previous_close == 175.0
        assert abs(quote.price - 175.0) <= MAX_QUOTE_CHANGE
        assert quote.price == pytest.approx(175.0 + quote.change, abs=0.01)

    async def test_unknown_symbol_uses_default_base(self, mock_provider):
        quote = await mock_provider.get_quote("ZZZZ", "US")
        assert quote.previous_close == 100.0

    async def test_seeded_rng_is_reproducible(self):
        a = MockProvider(simulate_latency=False, rng=random.Random(7))
        b = MockProvider(simulate_latency=False, rng=random.Random(7))
        qa = await a.get_quote("NVDA", "NASDAQ")
        qb = await b.get_quote("NVDA", "NASDAQ")
        assert qa.price == qb.price
        assert qa.volume == qb.volume

    async def test_optional_fields_filled(self, mock_provider):
        quote = await mock_provider.get_quote("MSFT", "NASDAQ")
        assert quote.volume is not None
        assert quote.market_cap is not None
        assert quote.high >= quote.low


class TestBatchQuotes:
    async def test_keys_follow_pairs(self, mock_provider):
        stocks = [StockRef(symbol="AAPL", exchange="NASDAQ"), StockRef(symbol="SAP", exchange="XETRA")]
        quotes = await mock_provider.get_batch_quotes(stocks)
        assert set(quotes) == {"AAPL:NASDAQ", "SAP:XETRA"}
        assert quotes["SAP:XETRA"].previous_close == BASE_PRICES["SAP"]

    async def test_empty_input(self, mock_provider):
        assert await mock_provider.get_batch_quotes([]) == {}


class TestHistoricalData:
    @pytest.mark.parametrize(
        ("timeframe", "count", "step"),
        [
            (Timeframe.ONE_DAY, 78, timedelta(minutes=5)),
            (Timeframe.ONE_WEEK, 5, timedelta(days=1)),
            (Timeframe.ONE_MONTH, 21, timedelta(days=1)),
            (Timeframe.THREE_MONTHS, 63, timedelta(days=1)),
            (Timeframe.ONE_YEAR, 252, timedelta(days=1)),
            (Timeframe.FIVE_YEARS, 60, timedelta(days=30)),
        ],
    )
    async def test_count_and_spacing(self, mock_provider, timeframe, count, step):
        candles = await mock_provider.get_historical_data("AAPL", "NASDAQ", timeframe)
        assert len(candles) == count
        gaps = {b.timestamp - a.timestamp for a, b in zip(candles, candles[1:])}
        assert gaps <= {step}

    async def test_ascending_and_consistent(self, mock_provider):
        candles = await mock_provider.get_historical_data("TSLA", "NASDAQ", Timeframe.ONE_YEAR)
        timestamps = [c.timestamp for c in candles]
        assert timestamps == sorted(timestamps)
        assert len(set(timestamps)) == len(timestamps)
        for c in candles:
            assert c.low <= min(c.open, c.close)
            assert c.high >= max(c.open, c.close)

    async def test_unmapped_timeframe_uses_default(self, mock_provider):
        candles = await mock_provider.get_historical_data("AAPL", "NASDAQ", "10Y")
        assert len(candles) == 30


class TestLifecycle:
    async def test_health_check(self, mock_provider):
        assert await mock_provider.health_check() is True

    async def test_is_a_provider(self, mock_provider):
        assert isinstance(mock_provider, MarketDataProviderABC)
        assert mock_provider.name == "mock"

    async def test_context_manager_stops_streaming(self):
        async with MockProvider(simulate_latency=False) as provider:
            provider.streaming = True
        assert provider.streaming is False
