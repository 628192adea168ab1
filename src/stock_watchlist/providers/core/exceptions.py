"""Typed failures raised by market data providers.

Providers translate transport errors and vendor error payloads into these
exceptions so that httpx and vendor quirks never leak to callers.
"""
from typing import Any


class MarketDataError(Exception):
    """Base class for provider failures.

    Carries the vendor name and an optional ``context`` dict of structured
    details (symbol, status_code, vendor_message, ...).
    """

    def __init__(
        self,
        message: str,
        *,
        vendor: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.vendor = vendor
        self.context = context or {}


class VendorRateLimited(MarketDataError):
    """Upstream refused the call because of its rate limit (HTTP 429 or an in-body notice)."""


class VendorInvalidResponse(MarketDataError):
    """Upstream answered, but not with the expected payload shape."""


class NoQuoteData(MarketDataError):
    """The symbol has no tradable price."""


class NetworkFailure(MarketDataError):
    """The request did not complete (connection, timeout, upstream 5xx)."""


class VendorTimeout(NetworkFailure, TimeoutError):
    """The upstream did not answer in time. Also a TimeoutError, so it maps to 504."""


class UnsupportedTimeframe(MarketDataError):
    """A timeframe outside the Timeframe enumeration was requested."""
