"""Portfolio error types.

Raised synchronously by ledger operations before any change is made.
"""


class PortfolioError(Exception):
    """Base class for portfolio errors."""


class HoldingValidationError(PortfolioError, ValueError):
    """Purchase or update fields are missing or invalid."""


class UnknownSymbolError(PortfolioError):
    """The market-data provider does not know the symbol."""

    def __init__(self, symbol: str):
        super().__init__(f"Invalid stock symbol: {symbol}")
        self.symbol = symbol


class UnknownFieldError(PortfolioError):
    """An update referenced a field a Holding does not have."""

    def __init__(self, fields: list[str]):
        super().__init__(f"Unknown holding fields: {', '.join(sorted(fields))}")
        self.fields = fields
