"""Ticker search API routes."""

from fastapi import APIRouter, Depends, HTTPException, Query

from finsight.api.dependencies import get_ticker_search
from finsight.api.schemas import SearchResponse, SearchResult
from finsight.errors import DataSourceError
from finsight.services import TickerSearch
from finsight.services.search import DEFAULT_LIMIT, MAX_LIMIT

router = APIRouter()

MAX_QUERY_LENGTH = 100


@router.get("/tickers", response_model=SearchResponse)
def search_tickers(
    q: str = Query("", description="Ticker or company name"),
    limit: int = Query(DEFAULT_LIMIT, ge=1),
    search: TickerSearch = Depends(get_ticker_search),
):
    """Fuzzy search over SEC-registered tickers and company names."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="query parameter 'q' is required")
    if len(query) > MAX_QUERY_LENGTH:
        raise HTTPException(status_code=400, detail=f"query too long (max {MAX_QUERY_LENGTH} characters)")

    try:
        records = search.search(query, min(limit, MAX_LIMIT))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=f"Search unavailable: {e}")

    results = [SearchResult.model_validate(r) for r in records]
    return SearchResponse(query=query, results=results, total=len(results))
