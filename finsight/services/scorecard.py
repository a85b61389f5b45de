"""Rule-based fundamentals scorecard ("Big 5" metrics).

Every metric follows the same shape: check that its inputs are available, compute
the ratio, then classify it against fixed thresholds. Missing inputs produce an
``N/A`` rating with an explanation; nothing here raises.
"""

import logging

from finsight.models import (
    Available,
    CompanyData,
    Rating,
    Scorecard,
    ScorecardMetric,
)

logger = logging.getLogger(__name__)

SHARES_UNIT = 1_000_000  # Shares outstanding are reported in millions

# PEG has no live growth-estimate source; this is independent of the DCF growth assumption
PEG_ASSUMED_GROWTH_PCT = 8.0


def _unavailable(message: str) -> ScorecardMetric:
    return ScorecardMetric(rating=Rating.UNAVAILABLE, message=message)


def calculate_pe_ratio(data: CompanyData) -> ScorecardMetric:
    """Price / EPS, compared with the 5-year average when one is known."""
    if not isinstance(data.quote, Available) or not isinstance(data.financials, Available):
        return _unavailable("Insufficient data to calculate P/E ratio")
    if data.shares_outstanding <= 0:
        return _unavailable("Shares outstanding not available")
    if data.quote.value.current_price <= 0:
        return _unavailable("Current price not available")

    financials = data.financials.value
    if financials.net_income <= 0:
        return ScorecardMetric(rating=Rating.UNFAVORABLE, message="Company has negative or zero earnings")

    eps = financials.net_income / (data.shares_outstanding * SHARES_UNIT)
    pe = data.quote.value.current_price / eps

    five_year_avg = None
    if isinstance(data.historical, Available):
        avg = data.historical.value.pe_ratio_avg_5year
        if avg and avg > 0:
            five_year_avg = avg

    if five_year_avg is not None:
        if pe < five_year_avg * 0.9:
            rating = Rating.FAVORABLE
            message = f"P/E ({pe:.2f}) is below 5-year average ({five_year_avg:.2f}) - potentially undervalued"
        elif pe > five_year_avg * 1.2:
            rating = Rating.UNFAVORABLE
            message = f"P/E ({pe:.2f}) is above 5-year average ({five_year_avg:.2f}) - potentially overvalued"
        else:
            rating = Rating.NEUTRAL
            message = f"P/E ({pe:.2f}) is near 5-year average ({five_year_avg:.2f})"
    else:
        # No history, use general benchmarks
        if pe < 15:
            rating = Rating.FAVORABLE
            message = f"P/E of {pe:.2f} suggests good value"
        elif pe > 30:
            rating = Rating.UNFAVORABLE
            message = f"P/E of {pe:.2f} is relatively high"
        else:
            rating = Rating.NEUTRAL
            message = f"P/E of {pe:.2f} is moderate"

    return ScorecardMetric(rating=rating, message=message, current=pe, five_year_avg=five_year_avg)


def calculate_debt_to_equity(data: CompanyData) -> ScorecardMetric:
    """Total debt / shareholders' equity. Lower is safer."""
    if not isinstance(data.financials, Available):
        return _unavailable("No financial data available")

    financials = data.financials.value
    if financials.shareholders_equity <= 0:
        return ScorecardMetric(rating=Rating.UNFAVORABLE, message="Company has negative or zero equity")

    ratio = financials.total_debt / financials.shareholders_equity

    if ratio < 0.5:
        rating, message = Rating.FAVORABLE, f"Excellent debt levels ({ratio:.2f}) - very safe"
    elif ratio < 1.0:
        rating, message = Rating.NEUTRAL, f"Moderate debt levels ({ratio:.2f}) - acceptable"
    elif ratio < 2.0:
        rating, message = Rating.UNFAVORABLE, f"High debt levels ({ratio:.2f}) - risky"
    else:
        rating, message = Rating.UNFAVORABLE, f"Very high debt levels ({ratio:.2f}) - concerning"

    return ScorecardMetric(rating=rating, message=message, current=ratio)


def calculate_fcf_yield(data: CompanyData) -> ScorecardMetric:
    """Free cash flow / market cap, as a percentage."""
    if not isinstance(data.quote, Available) or not isinstance(data.financials, Available):
        return _unavailable("Insufficient data to calculate FCF Yield")

    market_cap = data.quote.value.market_cap
    if market_cap <= 0:
        return _unavailable("Market cap not available")

    fcf_yield = data.financials.value.free_cash_flow / market_cap * 100

    if fcf_yield > 8:
        rating, message = Rating.FAVORABLE, f"Excellent FCF yield ({fcf_yield:.2f}%) - strong cash generation"
    elif fcf_yield > 4:
        rating, message = Rating.NEUTRAL, f"Good FCF yield ({fcf_yield:.2f}%)"
    elif fcf_yield > 0:
        rating, message = Rating.UNFAVORABLE, f"Low FCF yield ({fcf_yield:.2f}%) - limited cash generation"
    else:
        rating, message = Rating.UNFAVORABLE, f"No positive free cash flow ({fcf_yield:.2f}%)"

    return ScorecardMetric(rating=rating, message=message, current=fcf_yield)


def calculate_peg_ratio(data: CompanyData, pe: ScorecardMetric) -> ScorecardMetric:
    """P/E divided by the assumed growth rate (in percent)."""
    if not pe.available:
        if pe.rating == Rating.UNFAVORABLE:
            return ScorecardMetric(
                rating=Rating.UNFAVORABLE,
                message="PEG not meaningful without positive earnings",
            )
        return _unavailable("P/E ratio not available")

    peg = pe.current / PEG_ASSUMED_GROWTH_PCT

    if peg < 1.0:
        rating, message = Rating.FAVORABLE, f"PEG of {peg:.2f} suggests undervalued relative to growth"
    elif peg < 1.5:
        rating, message = Rating.NEUTRAL, f"PEG of {peg:.2f} is fairly valued"
    else:
        rating, message = Rating.UNFAVORABLE, f"PEG of {peg:.2f} suggests overvalued relative to growth"

    message += f" (assuming {PEG_ASSUMED_GROWTH_PCT:.0f}% growth)"
    return ScorecardMetric(rating=rating, message=message, current=peg)


def calculate_roe(data: CompanyData) -> ScorecardMetric:
    """Net income / shareholders' equity, as a percentage."""
    if not isinstance(data.financials, Available):
        return _unavailable("No financial data available")

    financials = data.financials.value
    if financials.shareholders_equity <= 0:
        return ScorecardMetric(rating=Rating.UNFAVORABLE, message="Company has negative or zero equity")

    roe = financials.net_income / financials.shareholders_equity * 100

    if roe > 20:
        rating, message = Rating.FAVORABLE, f"Excellent ROE ({roe:.2f}%) - highly efficient management"
    elif roe > 15:
        rating, message = Rating.NEUTRAL, f"Good ROE ({roe:.2f}%) - solid management"
    elif roe > 0:
        rating, message = Rating.UNFAVORABLE, f"Low ROE ({roe:.2f}%) - poor capital efficiency"
    else:
        rating, message = Rating.UNFAVORABLE, f"Negative ROE ({roe:.2f}%) - losing money"

    return ScorecardMetric(rating=rating, message=message, current=roe)


def summarize(metrics: list[ScorecardMetric]) -> tuple[str, str]:
    """Roll the rated metrics up into (overall score, summary)."""
    rated = [m for m in metrics if m.rating != Rating.UNAVAILABLE]
    total = len(rated)

    if total == 0:
        return f"0/{len(metrics)} metrics available", "Insufficient data for analysis"

    favorable = sum(1 for m in rated if m.rating == Rating.FAVORABLE)
    neutral = sum(1 for m in rated if m.rating == Rating.NEUTRAL)
    unfavorable = sum(1 for m in rated if m.rating == Rating.UNFAVORABLE)

    score = f"{favorable + neutral}/{total} metrics healthy"

    percentage = favorable / total * 100
    if percentage >= 60:
        summary = "Strong fundamentals - Good investment candidate"
    elif percentage >= 40:
        summary = "Mixed fundamentals - Proceed with caution"
    else:
        summary = "Weak fundamentals - High risk"

    if unfavorable * 2 > total:
        summary = "Concerning fundamentals - Avoid or investigate further"

    return score, summary


def calculate_scorecard(data: CompanyData) -> Scorecard:
    """Compute the five fundamentals metrics and their roll-up for a company."""
    pe = calculate_pe_ratio(data)
    metrics = {
        "pe_ratio": pe,
        "debt_to_equity": calculate_debt_to_equity(data),
        "fcf_yield": calculate_fcf_yield(data),
        "peg_ratio": calculate_peg_ratio(data, pe),
        "roe": calculate_roe(data),
    }
    overall_score, summary = summarize(list(metrics.values()))
    logger.debug(f"Scorecard for {data.ticker}: {overall_score}")
    return Scorecard(overall_score=overall_score, summary=summary, **metrics)
