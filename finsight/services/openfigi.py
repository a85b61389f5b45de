"""OpenFIGI identifier mapping client."""

import logging
from typing import Optional

import requests

from finsight.errors import DataSourceError

logger = logging.getLogger(__name__)

SOURCE = "OpenFIGI"
OPENFIGI_MAPPING_URL = "https://api.openfigi.com/v3/mapping"


class OpenFigiClient:
    """Maps ticker symbols to FIGI identifiers."""

    source = SOURCE

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def map_ticker(self, ticker: str) -> tuple[str, str]:
        """Return ``(figi, name)`` for the primary listing of a ticker."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-OPENFIGI-APIKEY"] = self.api_key

        try:
            response = self.session.post(
                OPENFIGI_MAPPING_URL,
                json=[{"idType": "TICKER", "idValue": ticker.upper(), "exchCode": "US"}],
                headers=headers,
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
            results = response.json()
        except ValueError as e:
            raise DataSourceError(SOURCE, f"failed to parse response: {e}") from e

        if not results:
            raise DataSourceError(SOURCE, f"no mapping found for ticker {ticker}", code="NO_MAPPING")
        if results[0].get("error"):
            raise DataSourceError(SOURCE, results[0]["error"], code="API_ERROR")

        data = results[0].get("data") or []
        if not data:
            raise DataSourceError(SOURCE, f"no mapping found for ticker {ticker}", code="NO_MAPPING")

        # First match is usually the primary exchange listing
        return data[0].get("figi", ""), data[0].get("name", "")
