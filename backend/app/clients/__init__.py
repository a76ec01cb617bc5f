"""Market-data clients."""

from app.clients.yahoo_finance import RateLimiter, YahooFinanceClient

__all__ = [
    "RateLimiter",
    "YahooFinanceClient",
]
