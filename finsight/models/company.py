"""Aggregated company data model."""

from dataclasses import dataclass, field
from typing import Optional

from finsight.models.availability import MaybeAvailable, Unavailable
from finsight.models.financials import FinancialStatement, HistoricalMetrics
from finsight.models.quote import Quote


@dataclass
class CompanyData:
    """Company data merged from every provider for a single request.

    Each optional field is either ``Available(value)`` or ``Unavailable(reason)``
    so the engines must handle the missing case explicitly.
    """
    ticker: str
    company_name: str
    cik: Optional[str] = None
    figi: Optional[str] = None
    quote: MaybeAvailable[Quote] = field(default_factory=lambda: Unavailable("not requested"))
    financials: MaybeAvailable[FinancialStatement] = field(
        default_factory=lambda: Unavailable("not requested")
    )
    historical: MaybeAvailable[HistoricalMetrics] = field(
        default_factory=lambda: Unavailable("not requested")
    )
    shares_outstanding: float = 0.0  # In millions

    def __repr__(self):
        return f"<CompanyData {self.ticker}: {self.company_name}>"
