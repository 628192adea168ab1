"""Provider selection: configuration in, exactly one provider out.

Selection never fails. A vendor without a usable API key, or an unknown
provider id, logs a warning and yields the mock provider instead.
"""
import logging
from enum import StrEnum

from stock_watchlist.providers.core import MarketDataProviderABC
from stock_watchlist.providers.stocks.alpha_vantage import AlphaVantageProvider
from stock_watchlist.providers.stocks.finnhub import FinnhubProvider
from stock_watchlist.providers.stocks.mock import MockProvider
from stock_watchlist.settings import ProviderSettings, usable_api_key

logger = logging.getLogger(__name__)


class ProviderType(StrEnum):
    """Known provider ids (MARKET_DATA_PROVIDER values)."""

    ALPHA_VANTAGE = "alpha_vantage"
    TWELVE_DATA = "twelve_data"
    FINNHUB = "finnhub"
    POLYGON = "polygon"
    MOCK = "mock"


def create_market_data_provider(
    provider_type: ProviderType | str | None = None,
    settings: ProviderSettings | None = None,
) -> MarketDataProviderABC:
    """Build the provider named by ``provider_type`` or by the settings.

    Args:
        provider_type: Explicit choice; wins over MARKET_DATA_PROVIDER.
        settings: Provider settings; read from the environment if omitted.

    Returns:
        A ready provider. Falls back to MockProvider when the choice is
        unknown, not implemented, or lacks an API key.
    """
    settings = settings or ProviderSettings.from_env()
    choice = (provider_type or settings.provider or ProviderType.MOCK).strip().lower()

    if choice == ProviderType.ALPHA_VANTAGE:
        api_key = usable_api_key(settings.alpha_vantage_api_key)
        if api_key is None:
            logger.warning("ALPHA_VANTAGE_API_KEY not set, falling back to mock provider")
            return MockProvider()
        return AlphaVantageProvider(api_key, timeout=settings.request_timeout)

    if choice == ProviderType.FINNHUB:
        api_key = usable_api_key(settings.finnhub_api_key)
        if api_key is None:
            logger.warning("FINNHUB_API_KEY not set, falling back to mock provider")
            return MockProvider()
        return FinnhubProvider(api_key, timeout=settings.request_timeout)

    if choice == ProviderType.MOCK:
        return MockProvider()

    if choice in (ProviderType.TWELVE_DATA, ProviderType.POLYGON):
        logger.warning("Provider %s is not implemented, using mock provider", choice)
    else:
        logger.warning("Unknown provider type: %s, using mock provider", choice)
    return MockProvider()
