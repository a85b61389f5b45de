"""Stock fundamentals scorecard and DCF valuation over multi-provider market data."""

__version__ = "0.1.0"
