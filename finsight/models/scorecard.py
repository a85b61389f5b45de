"""Fundamentals scorecard models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Rating(str, Enum):
    """Traffic-light rating for a single metric."""
    FAVORABLE = "GREEN"
    NEUTRAL = "YELLOW"
    UNFAVORABLE = "RED"
    UNAVAILABLE = "N/A"


@dataclass(frozen=True)
class ScorecardMetric:
    """One metric with its rating and a human readable rationale."""
    rating: Rating
    message: str
    current: Optional[float] = None
    five_year_avg: Optional[float] = None

    @property
    def available(self) -> bool:
        """True when a numeric value was computed."""
        return self.current is not None


@dataclass(frozen=True)
class Scorecard:
    """The five fundamentals metrics and their roll-up."""
    pe_ratio: ScorecardMetric
    debt_to_equity: ScorecardMetric
    fcf_yield: ScorecardMetric
    peg_ratio: ScorecardMetric
    roe: ScorecardMetric
    overall_score: str
    summary: str

    def metrics(self) -> list[ScorecardMetric]:
        return [self.pe_ratio, self.debt_to_equity, self.fcf_yield, self.peg_ratio, self.roe]
