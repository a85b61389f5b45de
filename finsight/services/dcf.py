"""Discounted cash flow valuation."""

import math
import logging
from typing import Optional

from finsight.errors import InsufficientDataError, InvalidAssumptionsError
from finsight.models import (
    Available,
    CompanyData,
    DCFAssumptions,
    DCFOverrides,
    DCFProjection,
    FinancialStatement,
    ValuationResult,
    SOURCE_DEFAULTS,
    SOURCE_USER_INPUT,
    value_or_none,
)

logger = logging.getLogger(__name__)

SHARES_UNIT = 1_000_000  # Shares outstanding are reported in millions

DEFAULT_REVENUE_GROWTH = 0.08
DEFAULT_PROFIT_MARGIN = 0.15
DEFAULT_FCF_MARGIN = 0.12
DEFAULT_DISCOUNT_RATE = 0.10
DEFAULT_TERMINAL_GROWTH = 0.025
DEFAULT_PROJECTION_YEARS = 5
DEFAULT_TARGET_PE = 15.0


def _historical_margin(numerator: float, revenue: float) -> Optional[float]:
    """numerator / revenue when it is a sensible margin in (0, 1)."""
    if revenue <= 0:
        return None
    margin = numerator / revenue
    if 0 < margin < 1:
        return margin
    return None


def build_assumptions(
    financials: FinancialStatement,
    overrides: Optional[DCFOverrides] = None,
) -> DCFAssumptions:
    """Resolve each assumption: override, then historical figure, then default.

    ``source`` is "user_input" when any field was overridden, otherwise "defaults"
    (historically derived margins are not tagged separately).
    """
    overrides = overrides or DCFOverrides()

    def pick(override, fallback):
        return override if override is not None else fallback

    profit_margin = pick(
        overrides.profit_margin,
        _historical_margin(financials.net_income, financials.revenue) or DEFAULT_PROFIT_MARGIN,
    )
    fcf_margin = pick(
        overrides.fcf_margin,
        _historical_margin(financials.free_cash_flow, financials.revenue) or DEFAULT_FCF_MARGIN,
    )

    return DCFAssumptions(
        revenue_growth_rate=pick(overrides.revenue_growth_rate, DEFAULT_REVENUE_GROWTH),
        profit_margin=profit_margin,
        fcf_margin=fcf_margin,
        discount_rate=pick(overrides.discount_rate, DEFAULT_DISCOUNT_RATE),
        terminal_growth_rate=pick(overrides.terminal_growth_rate, DEFAULT_TERMINAL_GROWTH),
        projection_years=pick(overrides.projection_years, DEFAULT_PROJECTION_YEARS),
        source=SOURCE_USER_INPUT if overrides.any_supplied() else SOURCE_DEFAULTS,
    )


def validate_assumptions(assumptions: DCFAssumptions) -> None:
    """Reject assumption sets for which the perpetuity formula is undefined."""
    for name in (
        "revenue_growth_rate",
        "profit_margin",
        "fcf_margin",
        "discount_rate",
        "terminal_growth_rate",
    ):
        value = getattr(assumptions, name)
        if not math.isfinite(value):
            raise InvalidAssumptionsError(
                f"{name.replace('_', ' ')} must be a finite number (got {value})"
            )
    if assumptions.projection_years < 1:
        raise InvalidAssumptionsError(
            f"projection years must be at least 1 (got {assumptions.projection_years})"
        )
    if assumptions.discount_rate <= -1:
        raise InvalidAssumptionsError(
            f"discount rate must be greater than -100% (got {assumptions.discount_rate})"
        )
    if assumptions.discount_rate <= assumptions.terminal_growth_rate:
        raise InvalidAssumptionsError(
            f"discount rate ({assumptions.discount_rate}) must exceed "
            f"terminal growth rate ({assumptions.terminal_growth_rate})"
        )


def project_cash_flows(base_revenue: float, assumptions: DCFAssumptions) -> list[DCFProjection]:
    """Year-by-year revenue, net income and FCF projections with present values."""
    projections = []
    for year in range(1, assumptions.projection_years + 1):
        revenue = base_revenue * (1 + assumptions.revenue_growth_rate) ** year
        fcf = revenue * assumptions.fcf_margin
        discount_factor = (1 + assumptions.discount_rate) ** year
        projections.append(
            DCFProjection(
                year=year,
                revenue=revenue,
                net_income=revenue * assumptions.profit_margin,
                free_cash_flow=fcf,
                discount_factor=discount_factor,
                present_value=fcf / discount_factor,
            )
        )
    return projections


def calculate_terminal_value(projections: list[DCFProjection], assumptions: DCFAssumptions) -> float:
    """Gordon growth terminal value at the end of the projection horizon."""
    if not projections:
        return 0.0
    terminal_fcf = projections[-1].free_cash_flow * (1 + assumptions.terminal_growth_rate)
    return terminal_fcf / (assumptions.discount_rate - assumptions.terminal_growth_rate)


def calculate_dcf(company: CompanyData, overrides: Optional[DCFOverrides] = None) -> ValuationResult:
    """Run a DCF valuation for aggregated company data.

    Raises InsufficientDataError without a financial statement or shares outstanding,
    and InvalidAssumptionsError for a degenerate assumption set.
    """
    if not isinstance(company.financials, Available):
        raise InsufficientDataError("no financial data available for DCF calculation")
    if company.shares_outstanding <= 0:
        raise InsufficientDataError("shares outstanding not available")

    financials = company.financials.value
    assumptions = build_assumptions(financials, overrides)
    validate_assumptions(assumptions)

    try:
        projections = project_cash_flows(financials.revenue, assumptions)
        terminal_value = calculate_terminal_value(projections, assumptions)

        pv_of_cash_flows = sum(p.present_value for p in projections)
        pv_of_terminal_value = terminal_value / (1 + assumptions.discount_rate) ** assumptions.projection_years
    except OverflowError as e:
        raise InvalidAssumptionsError(f"assumptions overflow the projection: {e}") from e

    # Enterprise value is used as equity value (no net debt adjustment)
    enterprise_value = pv_of_cash_flows + pv_of_terminal_value
    if not math.isfinite(enterprise_value):
        raise InvalidAssumptionsError("assumptions produce a non-finite enterprise value")
    fair_value = enterprise_value / (company.shares_outstanding * SHARES_UNIT)

    quote = value_or_none(company.quote)
    current_price = quote.current_price if quote else 0.0

    upside = 0.0
    if current_price > 0:
        upside = (fair_value - current_price) / current_price * 100

    logger.info(
        f"DCF for {company.ticker}: fair value {fair_value:.2f} vs price {current_price:.2f} "
        f"({assumptions.source})"
    )

    return ValuationResult(
        fair_value_per_share=fair_value,
        current_price=current_price,
        upside_percent=upside,
        assumptions=assumptions,
        projections=projections,
        terminal_value=terminal_value,
        enterprise_value=enterprise_value,
        shares_outstanding=company.shares_outstanding,
    )


def simple_pe_fair_value(company: CompanyData, target_pe: float = DEFAULT_TARGET_PE) -> float:
    """Fair value as EPS x target P/E."""
    if not isinstance(company.financials, Available) or company.shares_outstanding <= 0:
        raise InsufficientDataError("insufficient data for simple valuation")
    if target_pe <= 0:
        target_pe = DEFAULT_TARGET_PE

    eps = company.financials.value.net_income / (company.shares_outstanding * SHARES_UNIT)
    return eps * target_pe
