"""Quote and profile client using Yahoo Finance."""

import logging
from datetime import datetime, timezone

import pandas as pd
import yfinance as yf

from finsight.errors import DataSourceError
from finsight.models import CompanyProfile, Quote

logger = logging.getLogger(__name__)

SOURCE = "Yahoo"


def _float(value) -> float:
    return float(value) if pd.notna(value) else 0.0


class YahooClient:
    """Serves the same quote/profile contract as FinnhubClient from yfinance."""

    source = SOURCE

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def get_quote(self, ticker: str) -> Quote:
        """Build a quote from the last two daily bars."""
        try:
            hist = yf.Ticker(ticker).history(period="5d", auto_adjust=False, timeout=self.timeout)
        except Exception as e:
            raise DataSourceError(SOURCE, f"failed to fetch price history: {e}") from e

        # The current session's bar often has no close yet
        if not hist.empty:
            hist = hist.dropna(subset=["Close"])
        if hist.empty:
            raise DataSourceError(
                SOURCE, f"invalid ticker or no data available for {ticker}", code="NO_DATA"
            )

        last = hist.iloc[-1]
        current = _float(last["Close"])
        if current <= 0:
            raise DataSourceError(SOURCE, f"no valid price available for {ticker}", code="NO_DATA")
        previous_close = _float(hist.iloc[-2]["Close"]) if len(hist) > 1 else _float(last["Open"])
        change = current - previous_close if previous_close else 0.0

        idx = hist.index[-1]
        timestamp = idx.to_pydatetime() if hasattr(idx, "to_pydatetime") else datetime.now(timezone.utc)

        return Quote(
            ticker=ticker,
            current_price=current,
            change=change,
            change_percent=(change / previous_close * 100) if previous_close else 0.0,
            high=_float(last["High"]),
            low=_float(last["Low"]),
            open=_float(last["Open"]),
            previous_close=previous_close,
            volume=int(last["Volume"]) if pd.notna(last["Volume"]) else 0,
            timestamp=timestamp,
        )

    def get_profile(self, ticker: str) -> CompanyProfile:
        """Company profile with market cap and shares converted to millions."""
        try:
            info = yf.Ticker(ticker).info
        except Exception as e:
            raise DataSourceError(SOURCE, f"failed to fetch profile: {e}") from e

        if not info:
            raise DataSourceError(SOURCE, f"no profile available for {ticker}", code="NO_DATA")

        return CompanyProfile(
            name=info.get("longName") or info.get("shortName") or "",
            market_cap_millions=(info.get("marketCap") or 0) / 1_000_000,
            shares_outstanding_millions=(info.get("sharesOutstanding") or 0) / 1_000_000,
        )
