"""Domain concept for mapping provider exceptions to HTTP responses."""
import asyncio
from dataclasses import dataclass

from fastapi import HTTPException

from stock_watchlist.providers.core.exceptions import (
    NetworkFailure,
    NoQuoteData,
    UnsupportedTimeframe,
    VendorInvalidResponse,
    VendorRateLimited,
)


@dataclass(frozen=True)
class ProviderErrorMapper:
    """Maps provider exceptions to HTTP (status_code, detail).

    Inject this into services to centralize error-to-HTTP mapping with
    appropriate resource and API names.
    """

    resource_name: str = "Resource"
    api_name: str = "API"

    def _not_found(self, symbol: str | None) -> str:
        if symbol is None:
            return f"{self.resource_name} not found"
        return f"{self.resource_name} '{symbol}' not found"

    def to_http(
        self,
        exc: Exception,
        symbol: str | None = None,
    ) -> tuple[int, str]:
        """Map a provider exception to (status_code, detail) for HTTP responses.

        Args:
            exc: The exception raised by the provider or service.
            symbol: Optional symbol to include in detail (e.g. "AAPL").

        Returns:
            (status_code, detail) suitable for HTTPException(status_code=..., detail=...).
        """
        if isinstance(exc, NoQuoteData):
            return (404, self._not_found(symbol))
        if isinstance(exc, UnsupportedTimeframe):
            return (400, str(exc) or "Unsupported timeframe")
        if isinstance(exc, VendorRateLimited):
            return (429, f"{self.api_name} rate limit reached, try again later")
        if isinstance(exc, VendorInvalidResponse):
            return (502, f"{self.api_name} returned an invalid response")
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
            detail = "Request timed out"
            if symbol is not None:
                detail = f"Request to {self.api_name} timed out for '{symbol}'"
            return (504, detail)
        if isinstance(exc, NetworkFailure):
            return (503, f"{self.api_name} unavailable")
        return (500, "Internal server error")

    def raise_http(
        self,
        exc: Exception,
        symbol: str | None = None,
    ) -> None:
        """Map provider exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc, symbol=symbol)
        raise HTTPException(status_code=status_code, detail=detail) from exc
