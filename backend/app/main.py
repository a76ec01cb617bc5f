"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Reduce noise from third-party libraries (must be set before importing them)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("yfinance").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from app.api import router
from app.api.routes import VERSION
from app.clients import YahooFinanceClient
from app.config import Settings, get_settings
from app.services import MarketDataService, PortfolioService
from app.storage import FilePortfolioStore, PortfolioStore, RedisPortfolioStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> PortfolioStore:
    """Select the portfolio store for the configured backend."""
    if settings.storage_backend == "file":
        return FilePortfolioStore(settings.portfolio_file)
    return RedisPortfolioStore(settings.redis_url, settings.portfolio_key)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info("Starting equity signals service...")

    client = YahooFinanceClient(
        calls_per_minute=settings.provider_calls_per_minute,
        timeout=settings.fetch_timeout_seconds,
    )
    market = MarketDataService(
        client,
        period=settings.history_period,
        interval=settings.history_interval,
    )
    store = build_store(settings)
    await store.connect()
    portfolio_service = PortfolioService(store, market)
    await portfolio_service.load()

    # Expose services to API routes via app.state
    app.state.market = market
    app.state.portfolio_service = portfolio_service

    yield

    # Shutdown
    logger.info("Shutting down...")
    await client.close()
    await store.close()
    logger.info("Shutdown complete")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="Equity Signals",
        description="Buy/sell signals and portfolio tracking for equities",
        version=VERSION,
        lifespan=lifespan if use_lifespan else None,
        default_response_class=ORJSONResponse,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"name": "Equity Signals", "version": VERSION, "docs": "/docs"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def main():
    """Run the application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
