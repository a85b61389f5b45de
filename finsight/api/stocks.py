"""Stock fundamentals and valuation API routes."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from finsight.api.dependencies import get_stock_service
from finsight.api.schemas import (
    CikResponse,
    ScorecardResponse,
    StockAnalysisResponse,
    ValuationResponse,
)
from finsight.errors import (
    DataSourceError,
    InsufficientDataError,
    TickerNotFoundError,
    ValuationError,
)
from finsight.models import CompanyData, DCFOverrides, value_or_none
from finsight.services import (
    StockService,
    calculate_dcf,
    calculate_scorecard,
    data_freshness,
    simple_pe_fair_value,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_overrides(
    revenue_growth: Optional[float] = Query(None, description="e.g. 0.08 for 8%"),
    profit_margin: Optional[float] = Query(None),
    fcf_margin: Optional[float] = Query(None),
    discount_rate: Optional[float] = Query(None),
    terminal_growth: Optional[float] = Query(None),
    projection_years: Optional[int] = Query(None, ge=1, le=30),
) -> DCFOverrides:
    """DCF overrides from query string parameters."""
    return DCFOverrides(
        revenue_growth_rate=revenue_growth,
        profit_margin=profit_margin,
        fcf_margin=fcf_margin,
        discount_rate=discount_rate,
        terminal_growth_rate=terminal_growth,
        projection_years=projection_years,
    )


def _response(company: CompanyData, warnings: list[str], **kwargs) -> StockAnalysisResponse:
    quote = value_or_none(company.quote)
    current_price = quote.current_price if quote else 0.0
    return StockAnalysisResponse(
        ticker=company.ticker,
        company_name=company.company_name,
        current_price=current_price,
        last_updated=datetime.now(timezone.utc),
        warnings=warnings,
        data_freshness=data_freshness(company),
        **kwargs,
    )


@router.get("/{ticker}/fundamentals", response_model=StockAnalysisResponse)
def get_fundamentals(
    ticker: str,
    service: StockService = Depends(get_stock_service),
):
    """Big 5 fundamentals scorecard for a stock."""
    company, warnings = service.get_company_data(ticker)
    scorecard = calculate_scorecard(company)

    return _response(
        company,
        warnings,
        fundamental_scorecard=ScorecardResponse.model_validate(scorecard),
    )


@router.get("/{ticker}/valuation", response_model=StockAnalysisResponse)
def get_valuation(
    ticker: str,
    overrides: DCFOverrides = Depends(parse_overrides),
    service: StockService = Depends(get_stock_service),
):
    """DCF valuation, optionally with user-supplied assumptions."""
    company, warnings = service.get_company_data(ticker)

    try:
        valuation = calculate_dcf(company, overrides)
    except ValuationError as e:
        raise HTTPException(status_code=400, detail=f"Valuation failed: {e}")

    return _response(company, warnings, valuation=ValuationResponse.model_validate(valuation))


@router.get("/{ticker}/metrics", response_model=StockAnalysisResponse)
def get_metrics(
    ticker: str,
    overrides: DCFOverrides = Depends(parse_overrides),
    service: StockService = Depends(get_stock_service),
):
    """Scorecard and valuation together; a failed valuation becomes a warning."""
    company, warnings = service.get_company_data(ticker)
    scorecard = calculate_scorecard(company)

    valuation = None
    try:
        valuation = ValuationResponse.model_validate(calculate_dcf(company, overrides))
    except ValuationError as e:
        warnings.append(f"Valuation calculation failed: {e}")
        logger.warning(f"DCF error for {company.ticker}: {e}")

    pe_fair_value = None
    try:
        pe_fair_value = simple_pe_fair_value(company)
    except InsufficientDataError as e:
        logger.debug(f"No P/E fair value for {company.ticker}: {e}")

    return _response(
        company,
        warnings,
        fundamental_scorecard=ScorecardResponse.model_validate(scorecard),
        valuation=valuation,
        pe_fair_value=pe_fair_value,
    )


@router.get("/{ticker}/cik", response_model=CikResponse)
def get_cik(
    ticker: str,
    service: StockService = Depends(get_stock_service),
):
    """Resolve a ticker to its SEC CIK."""
    try:
        cik = service.resolver.resolve(ticker)
    except TickerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return CikResponse(ticker=ticker.strip().upper(), cik=cik)
