"""Portfolio ledger operations.

Every operation takes a Portfolio value and returns a new one; the input is
never mutated. Persistence is the caller's job.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError

from core.exceptions import HoldingValidationError, UnknownFieldError
from core.models import Holding, Portfolio

logger = logging.getLogger(__name__)

# Fields a caller may change with update_holding (wire aliases accepted)
UPDATABLE_FIELDS = {
    "name": "name",
    "shares": "shares",
    "average_price": "average_price",
    "averagePrice": "average_price",
    "purchase_date": "purchase_date",
    "purchaseDate": "purchase_date",
    "notes": "notes",
}


def _validation_error(exc: ValidationError) -> HoldingValidationError:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return HoldingValidationError(details or str(exc))


def add_holding(
    portfolio: Portfolio,
    symbol: str,
    name: str,
    shares: float,
    average_price: float,
    purchase_date: date,
    notes: str = "",
) -> Portfolio:
    """Record a purchase.

    A repeat purchase of a held symbol is merged in place: shares are summed,
    the average price becomes the quantity-weighted average, notes are only
    replaced when the new notes are non-empty, and the original purchase date
    and name are kept.

    Raises:
        HoldingValidationError: symbol empty, shares or average price not a
            finite number > 0 (also after merging).
    """
    if not symbol:
        raise HoldingValidationError("symbol is required")
    if shares is None or not shares > 0:
        raise HoldingValidationError(f"shares must be > 0, got {shares}")
    if average_price is None or not average_price > 0:
        raise HoldingValidationError(
            f"average_price must be > 0, got {average_price}"
        )
    if purchase_date is None:
        raise HoldingValidationError("purchase_date is required")

    existing = portfolio.get(symbol)

    if existing is None:
        try:
            holding = Holding(
                symbol=symbol,
                name=name or "",
                shares=shares,
                average_price=average_price,
                purchase_date=purchase_date,
                notes=notes or "",
            )
        except ValidationError as e:
            raise _validation_error(e) from e
        return Portfolio(items=(*portfolio.items, holding))

    total_shares = existing.shares + shares
    total_cost = existing.cost_basis + shares * average_price
    try:
        merged = Holding.model_validate(
            {
                **existing.model_dump(),
                "shares": total_shares,
                "average_price": total_cost / total_shares,
                "notes": notes or existing.notes,
            }
        )
    except ValidationError as e:
        raise _validation_error(e) from e

    logger.debug(
        f"Merged purchase of {shares} {symbol}: "
        f"{existing.shares} -> {total_shares} shares"
    )
    return Portfolio(
        items=tuple(merged if h.symbol == symbol else h for h in portfolio.items)
    )


def remove_holding(portfolio: Portfolio, symbol: str) -> Portfolio:
    """Drop the holding for ``symbol``. Removing an absent symbol is a no-op."""
    return Portfolio(items=tuple(h for h in portfolio.items if h.symbol != symbol))


def update_holding(
    portfolio: Portfolio,
    symbol: str,
    fields: dict[str, Any],
) -> Portfolio:
    """Shallow-merge ``fields`` into the holding for ``symbol``.

    No-op when the symbol is not held.

    Raises:
        UnknownFieldError: a field is not an updatable Holding field.
        HoldingValidationError: the merged holding is invalid.
    """
    unknown = [k for k in fields if k not in UPDATABLE_FIELDS]
    if unknown:
        raise UnknownFieldError(unknown)

    existing = portfolio.get(symbol)
    if existing is None:
        return portfolio

    data = existing.model_dump()
    for key, value in fields.items():
        data[UPDATABLE_FIELDS[key]] = value

    try:
        updated = Holding.model_validate(data)
    except ValidationError as e:
        raise _validation_error(e) from e

    return Portfolio(
        items=tuple(updated if h.symbol == symbol else h for h in portfolio.items)
    )
