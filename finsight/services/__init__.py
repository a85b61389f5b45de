"""Provider clients, identifier resolution, aggregation and analysis engines."""

from finsight.services.cik_resolver import CikResolver
from finsight.services.aggregator import StockService, data_freshness
from finsight.services.scorecard import calculate_scorecard
from finsight.services.dcf import calculate_dcf, simple_pe_fair_value
from finsight.services.search import TickerSearch
from finsight.services.factory import build_stock_service

__all__ = [
    "CikResolver",
    "StockService",
    "data_freshness",
    "calculate_scorecard",
    "calculate_dcf",
    "simple_pe_fair_value",
    "TickerSearch",
    "build_stock_service",
]
