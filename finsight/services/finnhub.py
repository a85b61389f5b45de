"""Finnhub quote and profile client."""

import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from finsight.errors import DataSourceError
from finsight.models import CompanyProfile, Quote

logger = logging.getLogger(__name__)

SOURCE = "Finnhub"
FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


class FinnhubClient:
    """Client for Finnhub real-time quotes and company profiles."""

    source = SOURCE

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, path: str, ticker: str) -> dict:
        if not self.api_key:
            raise DataSourceError(SOURCE, "FINNHUB_API_KEY is not configured", code="NO_API_KEY")

        try:
            response = self.session.get(
                f"{FINNHUB_BASE_URL}{path}",
                params={"symbol": ticker, "token": self.api_key},
                timeout=self.timeout,
            )
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

    def get_quote(self, ticker: str) -> Quote:
        """Fetch the real-time quote for a ticker."""
        data = self._request("/quote", ticker)

        # A zero current price means Finnhub does not know the symbol
        if not data.get("c"):
            raise DataSourceError(
                SOURCE, f"invalid ticker or no data available for {ticker}", code="NO_DATA"
            )

        timestamp = data.get("t")
        return Quote(
            ticker=ticker,
            current_price=float(data["c"]),
            change=float(data.get("d") or 0),
            change_percent=float(data.get("dp") or 0),
            high=float(data.get("h") or 0),
            low=float(data.get("l") or 0),
            open=float(data.get("o") or 0),
            previous_close=float(data.get("pc") or 0),
            timestamp=(
                datetime.fromtimestamp(timestamp, tz=timezone.utc)
                if timestamp
                else datetime.now(timezone.utc)
            ),
        )

    def get_profile(self, ticker: str) -> CompanyProfile:
        """Fetch company name, market cap and shares outstanding (both in millions)."""
        data = self._request("/stock/profile2", ticker)
        if not data:
            raise DataSourceError(SOURCE, f"no profile available for {ticker}", code="NO_DATA")

        return CompanyProfile(
            name=data.get("name") or "",
            market_cap_millions=float(data.get("marketCapitalization") or 0),
            shares_outstanding_millions=float(data.get("shareOutstanding") or 0),
        )
