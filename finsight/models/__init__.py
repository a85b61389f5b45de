"""Domain models."""

from finsight.models.availability import Available, Unavailable, MaybeAvailable, value_or_none
from finsight.models.quote import Quote, CompanyProfile
from finsight.models.financials import FinancialStatement, HistoricalMetrics
from finsight.models.company import CompanyData
from finsight.models.scorecard import Rating, ScorecardMetric, Scorecard
from finsight.models.valuation import (
    DCFAssumptions,
    DCFOverrides,
    DCFProjection,
    ValuationResult,
    SOURCE_DEFAULTS,
    SOURCE_USER_INPUT,
)
from finsight.models.ticker import TickerRecord

__all__ = [
    "Available",
    "Unavailable",
    "MaybeAvailable",
    "value_or_none",
    "Quote",
    "CompanyProfile",
    "FinancialStatement",
    "HistoricalMetrics",
    "CompanyData",
    "Rating",
    "ScorecardMetric",
    "Scorecard",
    "DCFAssumptions",
    "DCFOverrides",
    "DCFProjection",
    "ValuationResult",
    "SOURCE_DEFAULTS",
    "SOURCE_USER_INPUT",
    "TickerRecord",
]
