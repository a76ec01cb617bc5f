"""Portfolio service: ledger state, persistence and batch analysis.

Owns the current Portfolio value. Mutations are serialized through a single
asyncio lock, applied through the pure ledger functions, then saved as a
whole snapshot. A failed save is logged and does not undo the update.
"""

import asyncio
import logging
from datetime import date
from typing import Any

from app.clients import YahooFinanceClient
from app.storage import PortfolioStore
from core.exceptions import UnknownSymbolError
from core.ledger import add_holding, remove_holding, update_holding
from core.models import (
    Portfolio,
    PortfolioValuation,
    PriceBar,
    Quote,
    ScreenerEntry,
    SellSignalEntry,
    StockAnalysis,
)
from core.portfolio_analysis import analyze_sell_signals, screen_for_buys, valuate
from core.strategy import evaluate_buy, evaluate_sell

logger = logging.getLogger(__name__)


class MarketDataService:
    """Quote and history access with the configured lookback.

    Batch operations run without a per-symbol deadline of their own: the
    client bounds each provider call once its rate-limiter slot is granted,
    so a long queue never drops a symbol.
    """

    def __init__(
        self,
        client: YahooFinanceClient,
        period: str = "6mo",
        interval: str = "1d",
    ):
        self.client = client
        self.period = period
        self.interval = interval

    async def fetch_quote(self, symbol: str) -> Quote | None:
        return await self.client.fetch_quote(symbol)

    async def fetch_history(
        self,
        symbol: str,
        period: str | None = None,
        interval: str | None = None,
    ) -> list[PriceBar]:
        return await self.client.fetch_history(
            symbol, period or self.period, interval or self.interval
        )

    async def analyze(
        self,
        symbol: str,
        period: str | None = None,
        interval: str | None = None,
    ) -> StockAnalysis | None:
        """Quote, history and both signal evaluations for one symbol.

        Returns None when the quote is unavailable.
        """
        quote, history = await asyncio.gather(
            self.fetch_quote(symbol),
            self.fetch_history(symbol, period, interval),
        )
        if quote is None:
            return None

        return StockAnalysis(
            quote=quote,
            history=history,
            buy=evaluate_buy(quote, history),
            sell=evaluate_sell(quote, history),
        )

    async def screen(self, symbols: list[str]) -> list[ScreenerEntry]:
        return await screen_for_buys(
            symbols, self.fetch_quote, self.fetch_history, timeout=None
        )


class PortfolioService:
    """Single writer for the persisted portfolio."""

    def __init__(self, store: PortfolioStore, market: MarketDataService):
        self.store = store
        self.market = market
        self._portfolio = Portfolio()
        self._lock = asyncio.Lock()

    @property
    def portfolio(self) -> Portfolio:
        return self._portfolio

    async def load(self) -> Portfolio:
        """Initialize state from the store."""
        async with self._lock:
            self._portfolio = await self.store.load()
            logger.info(f"Loaded portfolio with {len(self._portfolio)} holdings")
            return self._portfolio

    async def _commit(self, portfolio: Portfolio) -> Portfolio:
        self._portfolio = portfolio
        if not await self.store.save(portfolio):
            logger.warning("Portfolio update kept in memory but not persisted")
        return portfolio

    async def add(
        self,
        symbol: str,
        shares: float,
        average_price: float,
        purchase_date: date,
        name: str = "",
        notes: str = "",
    ) -> Portfolio:
        """Record a purchase after confirming the symbol exists.

        Raises:
            HoldingValidationError: invalid purchase fields
            UnknownSymbolError: the provider has no quote for the symbol
        """
        # Validate fields before touching the provider
        add_holding(Portfolio(), symbol, name, shares, average_price, purchase_date)

        quote = await self.market.fetch_quote(symbol)
        if quote is None:
            raise UnknownSymbolError(symbol)

        async with self._lock:
            updated = add_holding(
                self._portfolio,
                symbol,
                name or quote.name,
                shares,
                average_price,
                purchase_date,
                notes,
            )
            logger.info(f"Added {shares} {symbol} @ {average_price}")
            return await self._commit(updated)

    async def update(self, symbol: str, fields: dict[str, Any]) -> Portfolio:
        async with self._lock:
            updated = update_holding(self._portfolio, symbol, fields)
            if updated is self._portfolio:
                return updated
            logger.info(f"Updated {symbol}: {sorted(fields)}")
            return await self._commit(updated)

    async def remove(self, symbol: str) -> Portfolio:
        async with self._lock:
            if self._portfolio.get(symbol) is None:
                return self._portfolio
            logger.info(f"Removed {symbol}")
            return await self._commit(remove_holding(self._portfolio, symbol))

    async def valuate(self) -> PortfolioValuation:
        return await valuate(
            self._portfolio, self.market.fetch_quote, timeout=None
        )

    async def analyze_sell_signals(self) -> list[SellSignalEntry]:
        return await analyze_sell_signals(
            self._portfolio,
            self.market.fetch_quote,
            self.market.fetch_history,
            timeout=None,
        )
