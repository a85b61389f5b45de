"""Ticker catalog entry model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TickerRecord:
    """One row of the SEC company tickers catalog."""
    ticker: str
    cik: str  # 10-digit, zero padded
    name: str = ""
