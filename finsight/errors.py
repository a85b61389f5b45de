"""Exception types shared by providers, the resolver and the valuation engine."""

from typing import Optional


class FinsightError(Exception):
    """Base class for all application errors."""


class DataSourceError(FinsightError):
    """An external data provider call failed."""

    def __init__(self, source: str, message: str, code: Optional[str] = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
        self.code = code


class TickerNotFoundError(DataSourceError):
    """Ticker could not be mapped to a CIK by any resolution tier."""

    def __init__(self, ticker: str, source: str = "EDGAR"):
        super().__init__(source, f"CIK not found for ticker {ticker}", code="CIK_NOT_FOUND")
        self.ticker = ticker


class ValuationError(FinsightError):
    """Valuation cannot be computed for the given company data or assumptions."""


class InsufficientDataError(ValuationError):
    """Required inputs (financial statement, shares outstanding) are missing."""


class InvalidAssumptionsError(ValuationError):
    """Assumption set would make the DCF formula diverge or be undefined."""
