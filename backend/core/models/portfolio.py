"""Portfolio, holding and derived result models."""

from __future__ import annotations

from datetime import date
from pydantic import ConfigDict, Field, model_validator

from core.models.base import CamelModel
from core.models.bar import PriceBar, Quote
from core.models.signal import SignalResult


class Holding(CamelModel):
    """A recorded position in one symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(min_length=1)
    name: str = ""
    shares: float = Field(gt=0, allow_inf_nan=False)
    average_price: float = Field(gt=0, allow_inf_nan=False)
    purchase_date: date
    notes: str = ""

    @property
    def cost_basis(self) -> float:
        """Total amount paid for the position."""
        return self.shares * self.average_price


class Portfolio(CamelModel):
    """Ordered collection of holdings, at most one per symbol.

    Immutable: ledger operations return a new Portfolio.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[Holding, ...] = ()

    @model_validator(mode="after")
    def _unique_symbols(self):
        seen: set[str] = set()
        for item in self.items:
            if item.symbol in seen:
                raise ValueError(f"duplicate holding for symbol '{item.symbol}'")
            seen.add(item.symbol)
        return self

    def get(self, symbol: str) -> Holding | None:
        for item in self.items:
            if item.symbol == symbol:
                return item
        return None

    @property
    def symbols(self) -> list[str]:
        return [item.symbol for item in self.items]

    def __len__(self) -> int:
        return len(self.items)


class ValuationRow(CamelModel):
    """Current value and profit of one holding. Derived, never stored."""

    holding: Holding
    current_price: float
    value: float
    profit: float
    profit_percent: float

    @classmethod
    def from_price(cls, holding: Holding, current_price: float) -> ValuationRow:
        value = holding.shares * current_price
        return cls(
            holding=holding,
            current_price=current_price,
            value=value,
            profit=value - holding.cost_basis,
            profit_percent=(
                (current_price - holding.average_price) / holding.average_price * 100
            ),
        )


class PortfolioValuation(CamelModel):
    """Valuation over the holdings whose quote could be fetched."""

    total_value: float = 0.0
    items: list[ValuationRow] = []


class SellSignalEntry(CamelModel):
    """Sell evaluation for one holding."""

    holding: Holding
    quote: Quote
    sell_signal: SignalResult


class StockAnalysis(CamelModel):
    """Quote, history and both signal evaluations for one symbol."""

    quote: Quote
    history: list[PriceBar]
    buy: SignalResult
    sell: SignalResult


class ScreenerEntry(CamelModel):
    """Buy-screener row for one watchlist symbol."""

    symbol: str
    name: str
    current_price: float
    change: float
    change_percent: float
    analysis: SignalResult
    score: int
