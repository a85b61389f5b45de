"""SEC EDGAR data client."""

import time
import logging
from datetime import date
from typing import Optional

import requests

from finsight.errors import DataSourceError
from finsight.models import FinancialStatement, TickerRecord

logger = logging.getLogger(__name__)

SOURCE = "EDGAR"

# SEC EDGAR API endpoints
SEC_COMPANY_TICKERS = "https://www.sec.gov/files/company_tickers.json"
SEC_COMPANY_FACTS = "https://data.sec.gov/api/xbrl/companyfacts/CIK{cik}.json"

# Only values reported in these forms/units are considered
REPORT_FORMS = ("10-K", "10-Q")
USD_UNITS = ("USD", "USD/shares")


def pad_cik(cik) -> str:
    """Pad a CIK to the 10-digit form used by EDGAR URLs."""
    return str(int(cik)).zfill(10)


class EdgarClient:
    """Client for the SEC ticker catalog and XBRL company facts."""

    source = SOURCE

    def __init__(
        self,
        user_agent: str,
        timeout: float = 10.0,
        rate_limit: float = 0.1,  # SEC allows 10 req/sec
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.rate_limit = rate_limit
        self.session = session or requests.Session()
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
        }

    def _request(self, url: str) -> dict:
        """Make rate-limited request to SEC API."""
        if self.rate_limit:
            time.sleep(self.rate_limit)
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise DataSourceError(SOURCE, f"request failed: {e}") from e

        if response.status_code != 200:
            raise DataSourceError(
                SOURCE,
                f"API error (status {response.status_code}): {response.text[:200]}",
                code=str(response.status_code),
            )

        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(SOURCE, f"failed to parse response: {e}") from e

    def get_company_tickers(self) -> dict[str, TickerRecord]:
        """Fetch the full ticker -> CIK catalog.

        The payload is shaped ``{"0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."}, ...}``.
        """
        data = self._request(SEC_COMPANY_TICKERS)
        catalog = parse_company_tickers(data)
        logger.info(f"Loaded {len(catalog)} tickers from SEC catalog")
        return catalog

    def get_financial_statement(self, cik: str) -> FinancialStatement:
        """Fetch XBRL company facts and reduce them to the latest statement."""
        facts = self._request(SEC_COMPANY_FACTS.format(cik=pad_cik(cik)))
        return parse_financial_statement(facts)


def parse_company_tickers(data: dict) -> dict[str, TickerRecord]:
    """Build the uppercase ticker -> TickerRecord map from company_tickers.json."""
    catalog = {}
    for entry in data.values():
        ticker = str(entry.get("ticker", "")).strip().upper()
        cik = entry.get("cik_str")
        if not ticker or cik is None:
            continue
        catalog[ticker] = TickerRecord(
            ticker=ticker,
            cik=pad_cik(cik),
            name=entry.get("title", ""),
        )
    return catalog


def _latest_fact(concepts: dict, concept: str) -> Optional[dict]:
    """Return the most recent 10-K/10-Q USD fact for a concept."""
    concept_data = concepts.get(concept)
    if not concept_data:
        return None

    latest = None
    for unit, values in concept_data.get("units", {}).items():
        if unit not in USD_UNITS:
            continue
        for val in values:
            if val.get("form") not in REPORT_FORMS or val.get("val") is None:
                continue
            if latest is None or val.get("end", "") > latest.get("end", ""):
                latest = val
    return latest


def _latest_value(concepts: dict, concept: str) -> float:
    fact = _latest_fact(concepts, concept)
    if fact is None:
        return 0.0
    try:
        return float(fact["val"])
    except (TypeError, ValueError):
        return 0.0


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_financial_statement(facts: dict) -> FinancialStatement:
    """Extract the fields we use from an EDGAR company facts payload."""
    us_gaap = facts.get("facts", {}).get("us-gaap")
    if not us_gaap:
        raise DataSourceError(SOURCE, "no us-gaap facts in company facts response", code="NO_DATA")

    revenue = _latest_value(us_gaap, "Revenues")
    revenue_concept = "Revenues"
    if revenue == 0:
        revenue = _latest_value(us_gaap, "RevenueFromContractWithCustomerExcludingAssessedTax")
        revenue_concept = "RevenueFromContractWithCustomerExcludingAssessedTax"

    total_debt = _latest_value(us_gaap, "LongTermDebt") + _latest_value(us_gaap, "ShortTermBorrowings")
    if total_debt == 0:
        total_debt = _latest_value(us_gaap, "DebtCurrent")

    # Period metadata comes from the latest headline income statement fact
    period, fiscal_year, report_date, filing_date = "", None, None, None
    candidates = [
        f for f in (_latest_fact(us_gaap, revenue_concept), _latest_fact(us_gaap, "NetIncomeLoss")) if f
    ]
    if candidates:
        latest = max(candidates, key=lambda f: f.get("end", ""))
        fiscal_year = latest.get("fy")
        if fiscal_year is not None:
            period = f"{fiscal_year}-{latest.get('fp', '')}"
        report_date = _parse_date(latest.get("end"))
        filing_date = _parse_date(latest.get("filed"))

    return FinancialStatement(
        revenue=revenue,
        net_income=_latest_value(us_gaap, "NetIncomeLoss"),
        total_assets=_latest_value(us_gaap, "Assets"),
        total_liabilities=_latest_value(us_gaap, "Liabilities"),
        total_debt=total_debt,
        shareholders_equity=_latest_value(us_gaap, "StockholdersEquity"),
        operating_cash_flow=_latest_value(us_gaap, "NetCashProvidedByUsedInOperatingActivities"),
        capex=_latest_value(us_gaap, "PaymentsToAcquirePropertyPlantAndEquipment"),
        period=period,
        fiscal_year=fiscal_year,
        report_date=report_date,
        filing_date=filing_date,
    )
