"""Main module for the stock watchlist market data service."""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from stock_watchlist.container import Container, container as default_container
from stock_watchlist.deps import MarketDataServiceDep
from stock_watchlist.routers import stocks_router
from stock_watchlist.schemas import HealthStatus

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI app over a DI container (the module container by default)."""
    if container is None:
        container = default_container

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Resolve the service at startup; close the provider on shutdown."""
        service = container.market_data_service()
        logger.info("Using market data provider: %s", service.provider.name)
        fastapi_app.state.container = container
        fastapi_app.state.market_data_service = service

        yield

        # Close provider resources (httpx clients), then drop the singletons
        # so the next startup builds fresh ones.
        await service.close()
        container.market_data_service.reset()
        container.market_data_provider.reset()

    fastapi_app = FastAPI(
        title="Stock Watchlist",
        description="Search, quotes and price history for a stock watchlist",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.include_router(stocks_router)

    @fastapi_app.get("/")
    def root():
        """Return liveness status."""
        return {"status": "ok"}

    @fastapi_app.get("/health", response_model=HealthStatus)
    async def health(service: MarketDataServiceDep) -> HealthStatus:
        """Probe the selected provider's upstream."""
        return await service.health_check()

    return fastapi_app


app = create_app()


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run():
    """Run the server (uvicorn). Use for the `stock-watchlist` script."""
    _configure_logging()
    uvicorn.run("stock_watchlist.main:app", host="127.0.0.1", port=8001)


def run_dev():
    """Run the development server with auto-reload."""
    _configure_logging()
    uvicorn.run("stock_watchlist.main:app", host="0.0.0.0", port=8000, reload=True)
