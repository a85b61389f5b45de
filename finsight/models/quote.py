"""Price and company profile models."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone


@dataclass(frozen=True)
class Quote:
    """Point-in-time price data for a stock."""
    ticker: str
    current_price: float
    change: float = 0.0
    change_percent: float = 0.0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    previous_close: float = 0.0
    volume: int = 0
    market_cap: float = 0.0  # Absolute value, not millions
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def with_market_cap(self, market_cap: float) -> "Quote":
        return replace(self, market_cap=market_cap)


@dataclass(frozen=True)
class CompanyProfile:
    """Company profile as reported by the price provider."""
    name: str
    market_cap_millions: float = 0.0
    shares_outstanding_millions: float = 0.0
