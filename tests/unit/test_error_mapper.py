"""Tests for ProviderErrorMapper."""

import asyncio

import pytest
from fastapi import HTTPException

from stock_watchlist.providers import (
    MarketDataError,
    NetworkFailure,
    NoQuoteData,
    ProviderErrorMapper,
    UnsupportedTimeframe,
    VendorInvalidResponse,
    VendorRateLimited,
    VendorTimeout,
)


class TestToHttp:
    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (NoQuoteData("x"), 404),
            (UnsupportedTimeframe("x"), 400),
            (VendorRateLimited("x"), 429),
            (VendorInvalidResponse("x"), 502),
            (NetworkFailure("x"), 503),
            (VendorTimeout("x"), 504),
            (asyncio.TimeoutError(), 504),
            (MarketDataError("x"), 500),
            (RuntimeError("x"), 500),
        ],
    )
    def test_status_codes(self, error_mapper, exc, status):
        assert error_mapper.to_http(exc)[0] == status

    def test_not_found_names_symbol(self, error_mapper):
        _, detail = error_mapper.to_http(NoQuoteData("x"), symbol="NOPE")
        assert detail == "Stock 'NOPE' not found"

    def test_not_found_without_symbol(self):
        mapper = ProviderErrorMapper()
        assert mapper.to_http(NoQuoteData("x")) == (404, "Resource not found")

    def test_rate_limit_names_api(self, error_mapper):
        _, detail = error_mapper.to_http(VendorRateLimited("x"))
        assert "Market data provider" in detail

    def test_timeout_names_symbol(self, error_mapper):
        _, detail = error_mapper.to_http(TimeoutError(), symbol="AAPL")
        assert "'AAPL'" in detail


class TestRaiseHttp:
    def test_raises_http_exception_chained(self, error_mapper):
        original = NetworkFailure("down", vendor="Finnhub")
        with pytest.raises(HTTPException) as exc_info:
            error_mapper.raise_http(original)
        assert exc_info.value.status_code == 503
        assert exc_info.value.__cause__ is original


class TestExceptionContext:
    def test_carries_vendor_and_context(self):
        exc = NoQuoteData("no data", vendor="Finnhub", context={"symbol": "NOPE"})
        assert str(exc) == "no data"
        assert exc.vendor == "Finnhub"
        assert exc.context == {"symbol": "NOPE"}

    def test_context_defaults_to_empty(self):
        assert MarketDataError("x").context == {}

    @pytest.mark.parametrize(
        "cls", [VendorRateLimited, VendorInvalidResponse, NoQuoteData, NetworkFailure, UnsupportedTimeframe]
    )
    def test_hierarchy(self, cls):
        assert issubclass(cls, MarketDataError)

    def test_timeout_is_network_failure_and_timeout_error(self):
        exc = VendorTimeout("slow", vendor="Finnhub")
        assert isinstance(exc, NetworkFailure)
        assert isinstance(exc, TimeoutError)
        assert str(exc) == "slow"
        assert exc.vendor == "Finnhub"
