"""DCF valuation models."""

from dataclasses import dataclass, field
from typing import Optional

SOURCE_USER_INPUT = "user_input"
SOURCE_DEFAULTS = "defaults"


@dataclass(frozen=True)
class DCFOverrides:
    """Caller-supplied assumptions; None means "not supplied"."""
    revenue_growth_rate: Optional[float] = None
    profit_margin: Optional[float] = None
    fcf_margin: Optional[float] = None
    discount_rate: Optional[float] = None
    terminal_growth_rate: Optional[float] = None
    projection_years: Optional[int] = None

    def any_supplied(self) -> bool:
        return any(
            value is not None
            for value in (
                self.revenue_growth_rate,
                self.profit_margin,
                self.fcf_margin,
                self.discount_rate,
                self.terminal_growth_rate,
                self.projection_years,
            )
        )


@dataclass(frozen=True)
class DCFAssumptions:
    """Resolved assumption set used for a valuation."""
    revenue_growth_rate: float  # e.g. 0.08 for 8%
    profit_margin: float
    fcf_margin: float
    discount_rate: float
    terminal_growth_rate: float
    projection_years: int = 5
    source: str = SOURCE_DEFAULTS  # "user_input" or "defaults"


@dataclass(frozen=True)
class DCFProjection:
    """A single projected year."""
    year: int
    revenue: float
    net_income: float
    free_cash_flow: float
    discount_factor: float
    present_value: float


@dataclass(frozen=True)
class ValuationResult:
    """DCF valuation output."""
    fair_value_per_share: float
    current_price: float
    upside_percent: float  # Positive = undervalued, negative = overvalued
    assumptions: DCFAssumptions
    projections: list[DCFProjection] = field(default_factory=list)
    terminal_value: float = 0.0
    enterprise_value: float = 0.0
    shares_outstanding: float = 0.0  # In millions
    model: str = "DCF"
