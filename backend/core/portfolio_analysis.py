"""Batch analysis over a portfolio or watchlist.

Market data is injected as async fetch callbacks so this module stays free
of I/O. Every per-symbol fetch runs concurrently; a symbol whose fetch fails
is left out of the result instead of failing the batch.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable

from core.batch import DEFAULT_TIMEOUT, gather_successes
from core.models import (
    Holding,
    Portfolio,
    PortfolioValuation,
    PriceBar,
    Quote,
    ScreenerEntry,
    SellSignalEntry,
    ValuationRow,
)
from core.strategy.trend_signals import buy_score, evaluate_buy, evaluate_sell

logger = logging.getLogger(__name__)

QuoteFetcher = Callable[[str], Awaitable[Quote | None]]
HistoryFetcher = Callable[[str], Awaitable[list[PriceBar]]]


async def valuate(
    portfolio: Portfolio,
    fetch_quote: QuoteFetcher,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> PortfolioValuation:
    """Value every holding at its current quote.

    Holdings without a quote are excluded; the total covers only the rows
    returned. Rows are sorted by value, largest first.
    """

    async def _row(holding: Holding) -> ValuationRow | None:
        quote = await fetch_quote(holding.symbol)
        if quote is None:
            return None
        return ValuationRow.from_price(holding, quote.price)

    rows = await gather_successes(portfolio.items, _row, timeout)
    rows.sort(key=lambda r: r.value, reverse=True)

    if len(rows) < len(portfolio):
        logger.info(f"Valued {len(rows)}/{len(portfolio)} holdings")

    return PortfolioValuation(total_value=sum(r.value for r in rows), items=rows)


async def analyze_sell_signals(
    portfolio: Portfolio,
    fetch_quote: QuoteFetcher,
    fetch_history: HistoryFetcher,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[SellSignalEntry]:
    """Run the sell evaluation for every holding.

    Entries with a sell signal come first; order within each group is not
    significant.
    """

    async def _entry(holding: Holding) -> SellSignalEntry | None:
        quote = await fetch_quote(holding.symbol)
        if quote is None:
            return None
        history = await fetch_history(holding.symbol)
        return SellSignalEntry(
            holding=holding,
            quote=quote,
            sell_signal=evaluate_sell(quote, history),
        )

    entries = await gather_successes(portfolio.items, _entry, timeout)
    entries.sort(key=lambda e: not e.sell_signal.is_signal)

    flagged = sum(1 for e in entries if e.sell_signal.is_signal)
    logger.info(
        f"Sell analysis: {flagged} signals across {len(entries)}/{len(portfolio)} holdings"
    )
    return entries


async def screen_for_buys(
    symbols: Iterable[str],
    fetch_quote: QuoteFetcher,
    fetch_history: HistoryFetcher,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[ScreenerEntry]:
    """Run the buy evaluation over a watchlist and rank by signal strength."""

    async def _entry(symbol: str) -> ScreenerEntry | None:
        quote = await fetch_quote(symbol)
        if quote is None:
            return None
        history = await fetch_history(symbol)
        analysis = evaluate_buy(quote, history)
        return ScreenerEntry(
            symbol=symbol,
            name=quote.name,
            current_price=quote.price,
            change=quote.change,
            change_percent=quote.change_percent,
            analysis=analysis,
            score=buy_score(analysis),
        )

    unique = list(dict.fromkeys(symbols))
    entries = await gather_successes(unique, _entry, timeout)
    entries.sort(key=lambda e: e.score, reverse=True)
    return entries
