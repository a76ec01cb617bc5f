#!/usr/bin/env python3
"""
Valuation and sell-signal report for a file-backed portfolio.

Usage:
    python scripts/portfolio_report.py
    python scripts/portfolio_report.py --file ~/portfolio.json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.clients import YahooFinanceClient
from app.config import get_settings
from app.services import MarketDataService, PortfolioService
from app.storage import FilePortfolioStore


async def run(path: Path) -> int:
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
    service = PortfolioService(FilePortfolioStore(path), market)

    try:
        portfolio = await service.load()
        if not len(portfolio):
            print(f"Portfolio at {path} is empty")
            return 0

        valuation, signals = await asyncio.gather(
            service.valuate(), service.analyze_sell_signals()
        )
    finally:
        await client.close()

    print()
    print("=" * 78)
    print(f"  {'Symbol':<10} {'Shares':>10} {'Avg':>10} {'Price':>10} {'Value':>14} {'P/L %':>8}")
    print("-" * 78)
    for row in valuation.items:
        h = row.holding
        print(
            f"  {h.symbol:<10} {h.shares:>10,.2f} {h.average_price:>10,.2f} "
            f"{row.current_price:>10,.2f} {row.value:>14,.2f} {row.profit_percent:>+8.2f}"
        )
    print("-" * 78)
    print(f"  Total value: {valuation.total_value:,.2f}")
    missing = len(portfolio) - len(valuation.items)
    if missing:
        print(f"  ({missing} holding(s) without a quote excluded)")

    print()
    print("  Sell signals")
    print("-" * 78)
    for entry in signals:
        flag = "SELL" if entry.sell_signal.is_signal else "    "
        print(f"  {flag} {entry.holding.symbol:<10} {entry.sell_signal.message}")
    print()
    return 0


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Portfolio valuation and sell-signal report")
    parser.add_argument(
        "--file", type=Path, default=settings.portfolio_file, help="Portfolio JSON file"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run(args.file)))


if __name__ == "__main__":
    main()
