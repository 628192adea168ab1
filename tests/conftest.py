"""Shared pytest fixtures for stock-watchlist."""

import random
from datetime import datetime, timezone

import pytest

from stock_watchlist.container import container
from stock_watchlist.providers import MockProvider, ProviderErrorMapper
from stock_watchlist.schemas import Quote, StockRef
from stock_watchlist.services import MarketDataService

PROVIDER_ENV_VARS = (
    "MARKET_DATA_PROVIDER",
    "ALPHA_VANTAGE_API_KEY",
    "FINNHUB_API_KEY",
    "MARKET_DATA_REQUEST_TIMEOUT",
    "QUOTE_STREAM_POLL_INTERVAL",
)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    """Tests never see the developer's provider configuration."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reset_container():
    """Drop container singletons before and after a test."""
    container.market_data_service.reset()
    container.market_data_provider.reset()
    yield container
    container.market_data_service.reset()
    container.market_data_provider.reset()


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider(simulate_latency=False, rng=random.Random(42))


@pytest.fixture
def error_mapper() -> ProviderErrorMapper:
    return ProviderErrorMapper(resource_name="Stock", api_name="Market data provider")


@pytest.fixture
def service(mock_provider, error_mapper) -> MarketDataService:
    return MarketDataService(mock_provider, error_mapper, stream_poll_interval=0)


@pytest.fixture
def sample_stocks() -> list[StockRef]:
    return [
        StockRef(symbol="AAPL", exchange="NASDAQ"),
        StockRef(symbol="SHOP.TO", exchange="TSX"),
    ]


@pytest.fixture
def sample_quote() -> Quote:
    return Quote(
        symbol="AAPL",
        exchange="NASDAQ",
        price=178.5,
        change=3.5,
        change_percent=2.0,
        timestamp=datetime(2024, 1, 15, 21, 0, tzinfo=timezone.utc),
        volume=50_000_000,
        previous_close=175.0,
    )
