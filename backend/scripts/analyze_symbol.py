#!/usr/bin/env python3
"""
Print quote and buy/sell signals for one symbol.

Usage:
    python scripts/analyze_symbol.py 7203.T
    python scripts/analyze_symbol.py AAPL --period 1y
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.clients import YahooFinanceClient
from app.config import get_settings
from app.services import MarketDataService


async def run(symbol: str, period: str | None, interval: str | None) -> int:
    settings = get_settings()
    client = YahooFinanceClient(
        calls_per_minute=settings.provider_calls_per_minute,
        timeout=settings.fetch_timeout_seconds,
    )
    market = MarketDataService(
        client,
        period=settings.history_period,
        interval=settings.history_interval,
    )

    analysis = await market.analyze(symbol, period, interval)
    await client.close()

    if analysis is None:
        print(f"No data for {symbol}")
        return 1

    q = analysis.quote
    print()
    print("=" * 60)
    print(f"  {q.symbol}  {q.name}")
    print("=" * 60)
    print(f"  Price:   {q.price:,.2f}  ({q.change:+,.2f} / {q.change_percent:+.2f}%)")
    print(f"  Range:   {q.day_low:,.2f} - {q.day_high:,.2f}")
    print(f"  Volume:  {q.volume:,.0f}  (avg {q.average_volume:,.0f})")
    print(f"  Bars:    {len(analysis.history)}")
    print("-" * 60)
    print(f"  BUY:     {'YES' if analysis.buy.is_signal else 'no '}  {analysis.buy.message}")
    print(f"  SELL:    {'YES' if analysis.sell.is_signal else 'no '}  {analysis.sell.message}")
    print()
    return 0


def main():
    parser = argparse.ArgumentParser(description="Analyze one symbol for buy/sell signals")
    parser.add_argument("symbol", help="Ticker symbol, e.g. 7203.T")
    parser.add_argument("--period", default=None, help="Lookback period (default from settings)")
    parser.add_argument("--interval", default=None, help="Bar size: 1d, 1wk or 1mo")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run(args.symbol, args.period, args.interval)))


if __name__ == "__main__":
    main()
