"""Data storage layer."""

from app.storage.portfolio_store import (
    FilePortfolioStore,
    PortfolioStore,
    RedisPortfolioStore,
    portfolio_from_json,
    portfolio_to_json,
)

__all__ = [
    "FilePortfolioStore",
    "PortfolioStore",
    "RedisPortfolioStore",
    "portfolio_from_json",
    "portfolio_to_json",
]
