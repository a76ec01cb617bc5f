"""Business services."""

from app.services.portfolio_service import MarketDataService, PortfolioService

__all__ = [
    "MarketDataService",
    "PortfolioService",
]
