"""Canned provider payloads used when USE_MOCK_DATA is enabled."""

from datetime import date, datetime, timezone

from finsight.models import CompanyProfile, FinancialStatement, Quote, TickerRecord

MOCK_COMPANIES = {
    "AAPL": ("BBG000B9XRY4", "Apple Inc.", "0000320193"),
    "MSFT": ("BBG000BPH459", "Microsoft Corporation", "0000789019"),
    "GOOGL": ("BBG009S39JX6", "Alphabet Inc.", "0001652044"),
    "AMZN": ("BBG000BVPV84", "Amazon.com Inc.", "0001018724"),
    "TSLA": ("BBG000N9MNX3", "Tesla Inc.", "0001318605"),
    "IBM": ("BBG000BLNNH6", "International Business Machines Corp.", "0000051143"),
    "KO": ("BBG000BMX289", "Coca-Cola Co.", "0000021344"),
    "DIS": ("BBG000BH4R78", "Walt Disney Co.", "0001744489"),
}


class MockProviders:
    """Implements every provider call with fixed, Apple-sized figures."""

    source = "Mock"

    def get_quote(self, ticker: str) -> Quote:
        return Quote(
            ticker=ticker,
            current_price=175.43,
            change=2.15,
            change_percent=1.24,
            high=176.50,
            low=173.20,
            open=174.00,
            previous_close=173.28,
            volume=52_000_000,
            market_cap=2_800_000_000_000,
            timestamp=datetime.now(timezone.utc),
        )

    def get_profile(self, ticker: str) -> CompanyProfile:
        return CompanyProfile(
            name="Mock Company Inc.",
            market_cap_millions=2_800_000,
            shares_outstanding_millions=16_000,
        )

    def get_company_tickers(self) -> dict[str, TickerRecord]:
        return {
            ticker: TickerRecord(ticker=ticker, cik=cik, name=name)
            for ticker, (_, name, cik) in MOCK_COMPANIES.items()
        }

    def get_financial_statement(self, cik: str) -> FinancialStatement:
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

    def map_ticker(self, ticker: str) -> tuple[str, str]:
        figi, name, _ = MOCK_COMPANIES.get(ticker.upper(), ("", "Mock Company Inc.", ""))
        return figi, name
