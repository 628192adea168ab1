"""DI container holding the process-wide market data provider.

The provider is a ThreadSafeSingleton: built on first access (under a lock),
then the same instance is returned for the rest of the process.
"""
from dependency_injector import containers, providers

from stock_watchlist.providers import ProviderErrorMapper, create_market_data_provider
from stock_watchlist.providers.core import MarketDataProviderABC
from stock_watchlist.services import MarketDataService
from stock_watchlist.settings import ProviderSettings


class Container(containers.DeclarativeContainer):
    settings = providers.Factory(ProviderSettings.from_env)

    market_data_provider = providers.ThreadSafeSingleton(
        create_market_data_provider,
        settings=settings,
    )

    error_mapper = providers.Singleton(
        ProviderErrorMapper,
        resource_name="Stock",
        api_name="Market data provider",
    )

    market_data_service = providers.Singleton(
        MarketDataService,
        market_data_provider,
        error_mapper,
        stream_poll_interval=settings.provided.stream_poll_interval,
    )


container = Container()


def get_market_data_provider() -> MarketDataProviderABC:
    """Return the process-wide provider, creating it on first call."""
    return container.market_data_provider()


def get_market_data_service() -> MarketDataService:
    """Return the process-wide service over get_market_data_provider()."""
    return container.market_data_service()
