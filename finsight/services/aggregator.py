"""Multi-provider company data aggregation."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional

from finsight.errors import DataSourceError
from finsight.models import (
    Available,
    CompanyData,
    CompanyProfile,
    FinancialStatement,
    Quote,
    Unavailable,
)
from finsight.services.cik_resolver import CikResolver

logger = logging.getLogger(__name__)

MARKET_CAP_UNIT = 1_000_000  # Profiles report market cap in millions
NO_HISTORY_REASON = "no historical metrics source configured"


class StockService:
    """Aggregates quote, profile, fundamentals and identifier data for a ticker.

    Provider failures never propagate: each one becomes a warning (except the
    identifier mapping, which is only logged) and the matching field is left
    ``Unavailable``.
    """

    def __init__(self, price_client, edgar_client, resolver: CikResolver, figi_client):
        self.price_client = price_client
        self.edgar_client = edgar_client
        self.resolver = resolver
        self.figi_client = figi_client

    def _fetch_financials(self, ticker: str) -> tuple[str, FinancialStatement]:
        cik = self.resolver.resolve(ticker)
        return cik, self.edgar_client.get_financial_statement(cik)

    @staticmethod
    def _outcome(future: Future, source: str) -> tuple[Optional[Any], Optional[DataSourceError]]:
        """Unwrap a finished provider call into (value, error)."""
        try:
            return future.result(), None
        except DataSourceError as e:
            return None, e
        except Exception as e:
            return None, DataSourceError(source, str(e) or type(e).__name__)

    def get_company_data(self, ticker: str) -> tuple[CompanyData, list[str]]:
        """Fetch from every provider and merge into one CompanyData plus warnings."""
        ticker = ticker.strip().upper()
        warnings: list[str] = []
        price_source = getattr(self.price_client, "source", "price")
        edgar_source = getattr(self.edgar_client, "source", "EDGAR")
        figi_source = getattr(self.figi_client, "source", "OpenFIGI")

        # Independent calls; each carries its own client-level timeout
        with ThreadPoolExecutor(max_workers=4, thread_name_prefix=f"aggregate-{ticker}") as pool:
            quote_future = pool.submit(self.price_client.get_quote, ticker)
            profile_future = pool.submit(self.price_client.get_profile, ticker)
            financials_future = pool.submit(self._fetch_financials, ticker)
            figi_future = pool.submit(self.figi_client.map_ticker, ticker)

        company = CompanyData(
            ticker=ticker,
            company_name="",
            historical=Unavailable(NO_HISTORY_REASON),
        )

        # 1. Quote
        quote, error = self._outcome(quote_future, price_source)
        if error:
            warning = f"Price data unavailable: {error}"
            warnings.append(warning)
            company.quote = Unavailable(warning)
            logger.warning(f"Quote error for {ticker}: {error}")
        else:
            company.quote = Available(quote)

        # 2. Profile: name, market cap, shares outstanding
        profile, error = self._outcome(profile_future, price_source)
        if error:
            warnings.append(f"Company profile unavailable: {error}")
            logger.warning(f"Profile error for {ticker}: {error}")
        else:
            self._merge_profile(company, profile)

        # 3. Fundamentals from SEC EDGAR
        result, error = self._outcome(financials_future, edgar_source)
        if error:
            warning = f"Fundamental data unavailable: {error}"
            warnings.append(warning)
            company.financials = Unavailable(warning)
            logger.warning(f"EDGAR error for {ticker}: {error}")
        else:
            company.cik, statement = result
            company.financials = Available(statement)

        # 4. FIGI mapping is optional enrichment, never a user warning
        mapping, error = self._outcome(figi_future, figi_source)
        if error:
            logger.warning(f"OpenFIGI error for {ticker}: {error}")
        else:
            figi, name = mapping
            company.figi = figi or None
            if not company.company_name:
                company.company_name = name or ""

        if not company.company_name:
            company.company_name = ticker

        return company, warnings

    @staticmethod
    def _merge_profile(company: CompanyData, profile: CompanyProfile) -> None:
        company.company_name = profile.name or ""
        company.shares_outstanding = profile.shares_outstanding_millions

        if isinstance(company.quote, Available) and profile.market_cap_millions > 0:
            quote: Quote = company.quote.value
            company.quote = Available(
                quote.with_market_cap(profile.market_cap_millions * MARKET_CAP_UNIT)
            )


def data_freshness(company: CompanyData) -> dict[str, str]:
    """Summarise how current each data source is."""
    freshness = {}

    freshness["price"] = "real-time" if isinstance(company.quote, Available) else "unavailable"

    if isinstance(company.financials, Available):
        freshness["fundamentals"] = company.financials.value.period or "available"
    else:
        freshness["fundamentals"] = "unavailable"

    return freshness
