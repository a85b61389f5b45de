"""Financial statement and historical metric models."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class FinancialStatement:
    """Latest reported fundamentals for a company (absolute USD values)."""

    # Income statement
    revenue: float = 0.0
    net_income: float = 0.0

    # Balance sheet
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    total_debt: float = 0.0
    shareholders_equity: float = 0.0

    # Cash flow
    operating_cash_flow: float = 0.0
    capex: float = 0.0

    # Metadata
    period: str = ""  # e.g. "2024-FY", "2024-Q3"
    fiscal_year: Optional[int] = None
    report_date: Optional[date] = None
    filing_date: Optional[date] = None

    @property
    def free_cash_flow(self) -> float:
        """Operating cash flow minus capex, only when both are reported positive."""
        if self.operating_cash_flow > 0 and self.capex > 0:
            return self.operating_cash_flow - self.capex
        return 0.0


@dataclass(frozen=True)
class HistoricalMetrics:
    """Historical series used for trend comparisons."""
    pe_ratios: list[float] = field(default_factory=list)
    pe_ratio_avg_5year: Optional[float] = None
    roe_history: list[float] = field(default_factory=list)
    fcf_yield_history: list[float] = field(default_factory=list)
