"""Wires provider clients, the CIK resolver and the aggregator from settings."""

import logging

from finsight.config import Settings
from finsight.services.aggregator import StockService
from finsight.services.cik_resolver import CikResolver
from finsight.services.edgar import EdgarClient
from finsight.services.finnhub import FinnhubClient
from finsight.services.mock import MockProviders
from finsight.services.openfigi import OpenFigiClient
from finsight.services.yahoo import YahooClient

logger = logging.getLogger(__name__)


def build_price_client(settings: Settings):
    if settings.price_provider == "yahoo":
        return YahooClient(timeout=settings.request_timeout)
    if settings.price_provider != "finnhub":
        raise ValueError(f"Unknown price provider: {settings.price_provider}")
    return FinnhubClient(api_key=settings.finnhub_api_key, timeout=settings.request_timeout)


def build_stock_service(settings: Settings) -> StockService:
    """Create a StockService with a fresh, process-scoped CikResolver."""
    if settings.use_mock_data:
        logger.info("Using mock data for all providers")
        mock = MockProviders()
        resolver = CikResolver(mock.get_company_tickers, ttl_seconds=settings.ticker_catalog_ttl_seconds)
        return StockService(mock, mock, resolver, mock)

    edgar = EdgarClient(user_agent=settings.sec_user_agent, timeout=settings.request_timeout)
    resolver = CikResolver(edgar.get_company_tickers, ttl_seconds=settings.ticker_catalog_ttl_seconds)
    return StockService(
        price_client=build_price_client(settings),
        edgar_client=edgar,
        resolver=resolver,
        figi_client=OpenFigiClient(timeout=settings.request_timeout),
    )
