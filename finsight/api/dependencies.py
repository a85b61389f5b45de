"""FastAPI dependencies shared by the routers."""

from functools import lru_cache

from fastapi import Depends

from finsight.config import get_settings
from finsight.services import StockService, TickerSearch, build_stock_service


@lru_cache
def get_stock_service() -> StockService:
    """Process-wide service; its CikResolver caches live as long as the process."""
    return build_stock_service(get_settings())


def get_ticker_search(service: StockService = Depends(get_stock_service)) -> TickerSearch:
    return TickerSearch(service.resolver)
