"""Tests for multi-provider aggregation and warning propagation."""

import pytest

from finsight.errors import DataSourceError
from finsight.models import Available, Unavailable
from finsight.services.aggregator import NO_HISTORY_REASON, data_freshness

from conftest import (
    CatalogFetcher,
    FakeEdgarClient,
    FakeFigiClient,
    FakePriceClient,
    provider_error,
)


def test_all_sources_succeed(make_service, statement):
    """Every source merges into CompanyData with no warnings."""
    service = make_service()
    company, warnings = service.get_company_data("aapl")

    assert warnings == []
    assert company.ticker == "AAPL"
    assert company.company_name == "Apple Inc"
    assert company.cik == "0000320193"
    assert company.figi == "BBG000B9XRY4"
    assert company.shares_outstanding == 16_000
    assert isinstance(company.quote, Available)
    assert company.financials == Available(statement)
    assert company.historical == Unavailable(NO_HISTORY_REASON)


def test_market_cap_converted_from_millions(make_service):
    """Profile market cap (millions) replaces the quote's market cap in dollars."""
    company, _ = make_service().get_company_data("AAPL")
    assert company.quote.value.market_cap == pytest.approx(2_800_000 * 1_000_000)


def test_quote_failure_becomes_warning(make_service, profile):
    """A failed quote leaves quote unavailable and adds one warning."""
    price = FakePriceClient(profile=profile, quote_error=provider_error("Finnhub", "rate limited"))
    company, warnings = make_service(price_client=price).get_company_data("AAPL")

    assert warnings == ["Price data unavailable: Finnhub: rate limited"]
    assert isinstance(company.quote, Unavailable)
    assert company.quote.reason == warnings[0]
    # Profile still merged
    assert company.shares_outstanding == 16_000


def test_profile_failure_keeps_quote_market_cap(make_service, quote):
    """Without a profile the name falls back to the FIGI name and shares stay 0."""
    price = FakePriceClient(quote=quote, profile_error=provider_error("Finnhub", "403"))
    company, warnings = make_service(price_client=price).get_company_data("AAPL")

    assert warnings == ["Company profile unavailable: Finnhub: 403"]
    assert company.company_name == "Apple Inc."
    assert company.shares_outstanding == 0
    assert company.quote.value.market_cap == quote.market_cap


def test_statement_failure_becomes_warning(make_service):
    """A failed EDGAR fetch leaves financials unavailable."""
    edgar = FakeEdgarClient(error=DataSourceError("EDGAR", "API error (status 404)", code="404"))
    company, warnings = make_service(edgar_client=edgar).get_company_data("AAPL")

    assert warnings == ["Fundamental data unavailable: EDGAR: API error (status 404)"]
    assert isinstance(company.financials, Unavailable)
    assert company.cik is None


def test_unresolvable_ticker_becomes_fundamentals_warning(make_service):
    """Resolution failure only affects the financial statement path."""
    service = make_service()
    company, warnings = service.get_company_data("NOPE")

    assert len(warnings) == 1
    assert warnings[0] == "Fundamental data unavailable: EDGAR: CIK not found for ticker NOPE"
    assert isinstance(company.quote, Available)
    assert service.edgar_client.requested_ciks == []


def test_figi_failure_is_not_a_warning(make_service):
    """Identifier mapping failure is logged only."""
    figi = FakeFigiClient(error=provider_error("OpenFIGI", "no mapping"))
    company, warnings = make_service(figi_client=figi).get_company_data("AAPL")

    assert warnings == []
    assert company.figi is None
    assert company.company_name == "Apple Inc"


def test_everything_fails(make_service):
    """Total provider failure still returns the ticker with one warning per source."""
    price = FakePriceClient(
        quote_error=provider_error("Finnhub", "down"),
        profile_error=provider_error("Finnhub", "down"),
    )
    edgar = FakeEdgarClient(error=provider_error("EDGAR", "down"))
    figi = FakeFigiClient(error=provider_error("OpenFIGI", "down"))

    company, warnings = make_service(
        price_client=price, edgar_client=edgar, figi_client=figi
    ).get_company_data("msft")

    assert len(warnings) == 3
    assert company.ticker == "MSFT"
    assert company.company_name == "MSFT"
    assert isinstance(company.quote, Unavailable)
    assert isinstance(company.financials, Unavailable)


def test_unexpected_exceptions_are_tagged_with_source(make_service, profile):
    """Non-provider exceptions are converted, not raised."""
    price = FakePriceClient(profile=profile, quote_error=KeyError("c"))
    _, warnings = make_service(price_client=price).get_company_data("AAPL")

    assert warnings == ["Price data unavailable: Finnhub: 'c'"]


def test_catalog_outage_only_degrades_fundamentals(make_service, clock):
    """Cold resolver with failing catalog: non-static ticker loses fundamentals only."""
    from finsight.services.cik_resolver import CikResolver

    fetcher = CatalogFetcher()
    fetcher.error = DataSourceError("EDGAR", "catalog down")
    company, warnings = make_service(resolver_=CikResolver(fetcher, clock=clock)).get_company_data("IBM")

    assert warnings == ["Fundamental data unavailable: EDGAR: catalog down"]
    assert isinstance(company.quote, Available)


def test_data_freshness(make_service, profile):
    company, _ = make_service().get_company_data("AAPL")
    assert data_freshness(company) == {"price": "real-time", "fundamentals": "2024-FY"}

    price = FakePriceClient(profile=profile, quote_error=provider_error())
    edgar = FakeEdgarClient(error=provider_error("EDGAR"))
    company, _ = make_service(price_client=price, edgar_client=edgar).get_company_data("AAPL")
    assert data_freshness(company) == {"price": "unavailable", "fundamentals": "unavailable"}
