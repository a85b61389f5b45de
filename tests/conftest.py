"""Shared fixtures: fake providers and a controllable clock."""

from datetime import date

import pytest

from finsight.errors import DataSourceError
from finsight.models import (
    Available,
    CompanyData,
    CompanyProfile,
    FinancialStatement,
    Quote,
    TickerRecord,
)
from finsight.services.aggregator import StockService
from finsight.services.cik_resolver import CikResolver


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CatalogFetcher:
    """Callable catalog source that counts calls and can be made to fail."""

    def __init__(self, catalog=None):
        self.catalog = catalog if catalog is not None else {}
        self.calls = 0
        self.error = None

    def __call__(self):
        self.calls += 1
        if self.error:
            raise self.error
        return dict(self.catalog)


class FakePriceClient:
    source = "Finnhub"

    def __init__(self, quote=None, profile=None, quote_error=None, profile_error=None):
        self.quote = quote
        self.profile = profile
        self.quote_error = quote_error
        self.profile_error = profile_error

    def get_quote(self, ticker):
        if self.quote_error:
            raise self.quote_error
        return self.quote

    def get_profile(self, ticker):
        if self.profile_error:
            raise self.profile_error
        return self.profile


class FakeEdgarClient:
    source = "EDGAR"

    def __init__(self, statement=None, error=None):
        self.statement = statement
        self.error = error
        self.requested_ciks = []

    def get_financial_statement(self, cik):
        self.requested_ciks.append(cik)
        if self.error:
            raise self.error
        return self.statement


class FakeFigiClient:
    source = "OpenFIGI"

    def __init__(self, figi="BBG000B9XRY4", name="Apple Inc.", error=None):
        self.figi = figi
        self.name = name
        self.error = error

    def map_ticker(self, ticker):
        if self.error:
            raise self.error
        return self.figi, self.name


def record(ticker: str, cik: str, name: str = "") -> TickerRecord:
    return TickerRecord(ticker=ticker, cik=cik, name=name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sec_catalog():
    return {
        "IBM": record("IBM", "0000051143", "International Business Machines Corp"),
        "KO": record("KO", "0000021344", "Coca-Cola Co"),
        "AAPL": record("AAPL", "0000320193", "Apple Inc."),
    }


@pytest.fixture
def fetcher(sec_catalog):
    return CatalogFetcher(sec_catalog)


@pytest.fixture
def resolver(fetcher, clock):
    return CikResolver(fetcher, ttl_seconds=24 * 3600, clock=clock)


@pytest.fixture
def quote():
    return Quote(ticker="AAPL", current_price=175.43, previous_close=173.28, market_cap=1.0)


@pytest.fixture
def profile():
    return CompanyProfile(name="Apple Inc", market_cap_millions=2_800_000, shares_outstanding_millions=16_000)


@pytest.fixture
def statement():
    return FinancialStatement(
        revenue=394_328_000_000,
        net_income=96_995_000_000,
        total_assets=352_755_000_000,
        total_liabilities=290_437_000_000,
        total_debt=109_280_000_000,
        shareholders_equity=62_318_000_000,
        operating_cash_flow=110_543_000_000,
        capex=10_959_000_000,
        period="2024-FY",
        fiscal_year=2024,
        report_date=date(2024, 9, 30),
        filing_date=date(2024, 11, 1),
    )


@pytest.fixture
def make_service(resolver, quote, profile, statement):
    """Build a StockService from fakes, overriding any collaborator."""

    def _make(price_client=None, edgar_client=None, figi_client=None, resolver_=None):
        return StockService(
            price_client=price_client or FakePriceClient(quote=quote, profile=profile),
            edgar_client=edgar_client or FakeEdgarClient(statement=statement),
            resolver=resolver_ or resolver,
            figi_client=figi_client or FakeFigiClient(),
        )

    return _make


@pytest.fixture
def company(quote, statement):
    """Fully populated company data (market cap in absolute dollars)."""
    return CompanyData(
        ticker="AAPL",
        company_name="Apple Inc",
        cik="0000320193",
        quote=Available(quote.with_market_cap(2_800_000_000_000)),
        financials=Available(statement),
        shares_outstanding=16_000,
    )


def provider_error(source: str = "Finnhub", message: str = "boom") -> DataSourceError:
    return DataSourceError(source, message)
