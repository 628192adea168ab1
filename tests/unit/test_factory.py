"""Tests for provider selection, settings and the process-wide provider."""

import logging

import pytest

from stock_watchlist.container import get_market_data_provider, get_market_data_service
from stock_watchlist.providers import (
    AlphaVantageProvider,
    FinnhubProvider,
    MockProvider,
    ProviderType,
    create_market_data_provider,
)
from stock_watchlist.settings import ProviderSettings, usable_api_key


class TestSettings:
    def test_defaults(self):
        settings = ProviderSettings.from_env()
        assert settings.provider is None
        assert settings.alpha_vantage_api_key is None
        assert settings.request_timeout == 10.0
        assert settings.stream_poll_interval == 30.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MARKET_DATA_PROVIDER", "finnhub")
        monkeypatch.setenv("FINNHUB_API_KEY", "abc")
        monkeypatch.setenv("MARKET_DATA_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("QUOTE_STREAM_POLL_INTERVAL", "5")

        settings = ProviderSettings.from_env()

        assert settings.provider == "finnhub"
        assert settings.finnhub_api_key == "abc"
        assert settings.request_timeout == 2.5
        assert settings.stream_poll_interval == 5.0

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            (None, None),
            ("", None),
            ("   ", None),
            ("your-alpha-vantage-api-key", None),
            ("your-finnhub-api-key", None),
            (" real-key ", "real-key"),
        ],
    )
    def test_usable_api_key(self, key, expected):
        assert usable_api_key(key) == expected


class TestCreateProvider:
    def test_default_is_mock(self):
        assert isinstance(create_market_data_provider(), MockProvider)

    def test_explicit_mock(self):
        assert isinstance(create_market_data_provider("mock"), MockProvider)

    async def test_alpha_vantage_with_key(self):
        settings = ProviderSettings(alpha_vantage_api_key="k")
        provider = create_market_data_provider(ProviderType.ALPHA_VANTAGE, settings)
        try:
            assert isinstance(provider, AlphaVantageProvider)
        finally:
            await provider.close()

    async def test_finnhub_from_environment(self, monkeypatch):
        monkeypatch.setenv("MARKET_DATA_PROVIDER", "finnhub")
        monkeypatch.setenv("FINNHUB_API_KEY", "k")
        provider = create_market_data_provider()
        try:
            assert isinstance(provider, FinnhubProvider)
        finally:
            await provider.close()

    def test_placeholder_key_falls_back(self, caplog):
        settings = ProviderSettings(provider="alpha_vantage", alpha_vantage_api_key="your-alpha-vantage-api-key")
        with caplog.at_level(logging.WARNING):
            provider = create_market_data_provider(settings=settings)
        assert isinstance(provider, MockProvider)
        assert "ALPHA_VANTAGE_API_KEY not set" in caplog.text

    def test_missing_finnhub_key_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            provider = create_market_data_provider("finnhub", ProviderSettings())
        assert isinstance(provider, MockProvider)
        assert "FINNHUB_API_KEY not set" in caplog.text

    def test_unknown_id_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            provider = create_market_data_provider("bloomberg")
        assert isinstance(provider, MockProvider)
        assert "Unknown provider type" in caplog.text

    @pytest.mark.parametrize("choice", ["twelve_data", "polygon"])
    def test_unimplemented_ids_fall_back(self, choice, caplog):
        with caplog.at_level(logging.WARNING):
            provider = create_market_data_provider(choice)
        assert isinstance(provider, MockProvider)
        assert "not implemented" in caplog.text

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv("MARKET_DATA_PROVIDER", "finnhub")
        monkeypatch.setenv("FINNHUB_API_KEY", "k")
        assert isinstance(create_market_data_provider("mock"), MockProvider)

    def test_case_insensitive(self):
        settings = ProviderSettings(provider=" MOCK ")
        assert isinstance(create_market_data_provider(settings=settings), MockProvider)


class TestProcessWideProvider:
    def test_same_instance(self, reset_container):
        assert get_market_data_provider() is get_market_data_provider()

    def test_service_wraps_singleton(self, reset_container):
        service = get_market_data_service()
        assert service.provider is get_market_data_provider()
        assert get_market_data_service() is service

    def test_reset_builds_new_instance(self, reset_container):
        first = get_market_data_provider()
        reset_container.market_data_provider.reset()
        assert get_market_data_provider() is not first

    async def test_placeholder_key_end_to_end(self, reset_container, monkeypatch):
        monkeypatch.setenv("MARKET_DATA_PROVIDER", "alpha_vantage")
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "your-alpha-vantage-api-key")

        provider = get_market_data_provider()

        assert isinstance(provider, MockProvider)
        results = await provider.search("AAPL")
        assert "AAPL" in [r.symbol for r in results]
