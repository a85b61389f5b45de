"""Pydantic response models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from finsight.models import Rating


class MetricResponse(BaseModel):
    """A single scorecard metric."""
    model_config = ConfigDict(from_attributes=True)

    current: Optional[float]
    five_year_avg: Optional[float]
    rating: Rating
    message: str
    available: bool


class ScorecardResponse(BaseModel):
    """The five fundamentals metrics."""
    model_config = ConfigDict(from_attributes=True)

    pe_ratio: MetricResponse
    debt_to_equity: MetricResponse
    fcf_yield: MetricResponse
    peg_ratio: MetricResponse
    roe: MetricResponse
    overall_score: str
    summary: str


class AssumptionsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    revenue_growth_rate: float
    profit_margin: float
    fcf_margin: float
    discount_rate: float
    terminal_growth_rate: float
    projection_years: int
    source: str


class ProjectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    revenue: float
    net_income: float
    free_cash_flow: float
    discount_factor: float
    present_value: float


class ValuationResponse(BaseModel):
    """DCF valuation result."""
    model_config = ConfigDict(from_attributes=True)

    fair_value_per_share: float
    current_price: float
    upside_percent: float
    model: str
    assumptions: AssumptionsResponse
    projections: list[ProjectionResponse]
    terminal_value: float
    enterprise_value: float
    shares_outstanding: float


class StockAnalysisResponse(BaseModel):
    """Full analysis response for a ticker."""
    ticker: str
    company_name: str
    current_price: float
    last_updated: datetime
    fundamental_scorecard: Optional[ScorecardResponse] = None
    valuation: Optional[ValuationResponse] = None
    pe_fair_value: Optional[float] = None  # EPS x target P/E, when earnings and shares are known
    warnings: list[str] = []
    data_freshness: dict[str, str] = {}


class CikResponse(BaseModel):
    ticker: str
    cik: str


class SearchResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ticker: str
    name: str


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResult]
    total: int
