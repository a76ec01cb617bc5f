"""REST API routes."""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from app.config import get_settings
from app.services import MarketDataService, PortfolioService
from core.exceptions import PortfolioError
from core.models import (
    CamelModel,
    Portfolio,
    PortfolioValuation,
    PriceBar,
    Quote,
    ScreenerEntry,
    SellSignalEntry,
    StockAnalysis,
)

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


# Request/response models
class AddHoldingRequest(CamelModel):
    """Purchase to record in the portfolio."""

    symbol: str
    shares: float
    average_price: float
    purchase_date: date
    name: str = ""
    notes: str = ""


class SystemStatus(CamelModel):
    """System status response."""

    status: str
    version: str
    storage_backend: str
    store_available: bool
    holdings: int


# Dependencies
def get_market(request: Request) -> MarketDataService:
    return request.app.state.market


def get_portfolio_service(request: Request) -> PortfolioService:
    return request.app.state.portfolio_service


@router.get("/status", response_model=SystemStatus)
async def get_status(service: PortfolioService = Depends(get_portfolio_service)):
    """Get system status."""
    settings = get_settings()
    return SystemStatus(
        status="running",
        version=VERSION,
        storage_backend=settings.storage_backend,
        store_available=await service.store.ping(),
        holdings=len(service.portfolio),
    )


# -----------------------------------------------------------------------------
# Single symbol
# -----------------------------------------------------------------------------

@router.get("/stock/{symbol}/quote", response_model=Quote)
async def get_quote(symbol: str, market: MarketDataService = Depends(get_market)):
    """Get the current quote for a symbol."""
    quote = await market.fetch_quote(symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"No quote for {symbol}")
    return quote


@router.get("/stock/{symbol}/history", response_model=list[PriceBar])
async def get_history(
    symbol: str,
    period: Optional[str] = Query(None, description="Lookback period, e.g. 6mo"),
    interval: Optional[str] = Query(None, description="Bar size: 1d, 1wk or 1mo"),
    market: MarketDataService = Depends(get_market),
):
    """Get daily bars for a symbol (empty when unavailable)."""
    return await market.fetch_history(symbol, period, interval)


@router.get("/stock/{symbol}/analysis", response_model=StockAnalysis)
async def get_analysis(
    symbol: str,
    period: Optional[str] = Query(None, description="Lookback period, e.g. 6mo"),
    interval: Optional[str] = Query(None, description="Bar size: 1d, 1wk or 1mo"),
    market: MarketDataService = Depends(get_market),
):
    """Get quote, history and buy/sell signals for a symbol."""
    analysis = await market.analyze(symbol, period, interval)
    if analysis is None:
        raise HTTPException(status_code=502, detail="Failed to fetch stock data")
    return analysis


@router.get("/screener", response_model=list[ScreenerEntry])
async def get_screener(market: MarketDataService = Depends(get_market)):
    """Rank the configured watchlist by buy-signal strength."""
    return await market.screen(get_settings().watchlist)


# -----------------------------------------------------------------------------
# Portfolio
# -----------------------------------------------------------------------------

@router.get("/portfolio", response_model=Portfolio)
async def get_portfolio(service: PortfolioService = Depends(get_portfolio_service)):
    """Get the current portfolio."""
    return service.portfolio


@router.post("/portfolio/holdings", response_model=Portfolio)
async def add_holding(
    body: AddHoldingRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Record a purchase; repeat purchases merge into the existing holding."""
    try:
        return await service.add(
            symbol=body.symbol,
            shares=body.shares,
            average_price=body.average_price,
            purchase_date=body.purchase_date,
            name=body.name,
            notes=body.notes,
        )
    except PortfolioError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/portfolio/holdings/{symbol}", response_model=Portfolio)
async def update_holding(
    symbol: str,
    fields: dict[str, Any] = Body(...),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Update fields of a holding. Unknown symbols are ignored."""
    try:
        return await service.update(symbol, fields)
    except PortfolioError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/portfolio/holdings/{symbol}", response_model=Portfolio)
async def remove_holding(
    symbol: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Remove a holding. Unknown symbols are ignored."""
    return await service.remove(symbol)


@router.get("/portfolio/valuation", response_model=PortfolioValuation)
async def get_valuation(service: PortfolioService = Depends(get_portfolio_service)):
    """Value holdings at current prices, largest position first."""
    return await service.valuate()


@router.get("/portfolio/sell-signals", response_model=list[SellSignalEntry])
async def get_sell_signals(service: PortfolioService = Depends(get_portfolio_service)):
    """Run sell analysis across holdings, flagged holdings first."""
    return await service.analyze_sell_signals()
