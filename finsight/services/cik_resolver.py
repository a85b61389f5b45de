"""Ticker -> CIK resolution with a memo cache, a static table and a TTL'd SEC catalog.

Lookup order for ``CikResolver.resolve``:

1. memo cache (tickers resolved earlier in this process, never evicted)
2. static table of the most requested tickers (no network)
3. the bulk SEC catalog, refreshed first when it is missing or older than the TTL

Memo and static hits do not depend on the catalog, so they short-circuit before
the freshness check. Everything else goes through the freshness check, which makes
tickers listed upstream resolvable as soon as the TTL elapses.
Static-table tickers therefore never trigger a catalog fetch, even when the
catalog is missing or stale.

A failed refresh keeps the previous catalog, however stale. Only a resolver that
has never loaded a catalog reports the fetch error, and only when memo and static
lookups also miss.
"""

import time
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from finsight.errors import DataSourceError, TickerNotFoundError
from finsight.models import TickerRecord

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_TTL = 24 * 60 * 60  # seconds

# Hand-picked hot path. These are not revalidated against the catalog; when the
# catalog disagrees the static CIK still wins and the conflict is logged.
COMMON_CIKS = {
    "AAPL": "0000320193",
    "MSFT": "0000789019",
    "GOOGL": "0001652044",
    "GOOG": "0001652044",
    "AMZN": "0001018724",
    "TSLA": "0001318605",
    "META": "0001326801",
    "NVDA": "0001045810",
    "JPM": "0000019617",
    "V": "0001403161",
    "BAC": "0000070858",
    "WMT": "0000104169",
    "XOM": "0000034088",
    "UNH": "0000731766",
    "JNJ": "0000200406",
}


class NoCatalog:
    """State before any catalog load has succeeded."""

    def __repr__(self):
        return "<NoCatalog>"


NO_CATALOG = NoCatalog()


@dataclass(frozen=True)
class TickerCatalog:
    """Immutable snapshot of the SEC ticker catalog."""
    entries: Mapping[str, TickerRecord]
    loaded_at: float

    def is_stale(self, now: float, ttl: float) -> bool:
        return now - self.loaded_at > ttl

    def get(self, ticker: str) -> Optional[TickerRecord]:
        return self.entries.get(ticker)

    def __len__(self):
        return len(self.entries)


@dataclass(frozen=True)
class RefreshOk:
    catalog: TickerCatalog
    fetched: bool  # False when the existing catalog was still fresh


@dataclass(frozen=True)
class RefreshFailed:
    error: DataSourceError


RefreshResult = Union[RefreshOk, RefreshFailed]


class CikResolver:
    """Process-scoped ticker -> CIK resolver shared by all requests."""

    def __init__(
        self,
        fetch_catalog: Callable[[], Mapping[str, TickerRecord]],
        ttl_seconds: float = DEFAULT_CATALOG_TTL,
        static_ciks: Optional[Mapping[str, str]] = None,
        clock: Callable[[], float] = time.monotonic,
        source: str = "EDGAR",
    ):
        self._fetch_catalog = fetch_catalog
        self.ttl_seconds = ttl_seconds
        self.source = source
        self._clock = clock
        self._static = {
            ticker.upper(): cik
            for ticker, cik in (COMMON_CIKS if static_ciks is None else static_ciks).items()
        }
        self._memo: dict[str, str] = {}

        # Readers take self._catalog without the lock; it is only ever rebound
        # to a new immutable snapshot.
        self._catalog: Union[TickerCatalog, NoCatalog] = NO_CATALOG
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None

    @property
    def catalog(self) -> Union[TickerCatalog, NoCatalog]:
        return self._catalog

    def resolve(self, ticker: str) -> str:
        """Return the 10-digit CIK for a ticker.

        Raises TickerNotFoundError when no tier knows the ticker, or the catalog
        fetch error when no catalog has ever loaded.
        """
        ticker = ticker.strip().upper()

        cik = self._memo.get(ticker)
        if cik:
            logger.debug(f"CIK memo hit for {ticker}")
            return cik

        cik = self._static.get(ticker)
        if cik:
            logger.debug(f"CIK static table hit for {ticker}")
            return self._memo.setdefault(ticker, cik)

        refresh_error = self.ensure_fresh()

        catalog = self._catalog
        if isinstance(catalog, TickerCatalog):
            record = catalog.get(ticker)
            if record:
                logger.debug(f"CIK catalog hit for {ticker}")
                return self._memo.setdefault(ticker, record.cik)

        if refresh_error is not None:
            raise refresh_error
        raise TickerNotFoundError(ticker, source=self.source)

    def ensure_fresh(self) -> Optional[DataSourceError]:
        """Refresh the catalog if needed.

        Returns the fetch error only when there is no catalog at all to fall back on.
        """
        result = self.refresh()
        if isinstance(result, RefreshOk):
            return None

        catalog = self._catalog
        if isinstance(catalog, TickerCatalog):
            age = self._clock() - catalog.loaded_at
            logger.warning(
                f"Ticker catalog refresh failed ({result.error}); "
                f"using stale catalog loaded {age:.0f}s ago"
            )
            return None

        logger.error(f"Ticker catalog unavailable: {result.error}")
        return result.error

    def refresh(self, force: bool = False) -> RefreshResult:
        """Load a new catalog when missing or stale.

        Concurrent callers share one in-flight fetch.
        """
        with self._lock:
            catalog = self._catalog
            if (
                not force
                and isinstance(catalog, TickerCatalog)
                and not catalog.is_stale(self._clock(), self.ttl_seconds)
            ):
                return RefreshOk(catalog, fetched=False)

            future = self._inflight
            leader = future is None
            if leader:
                future = Future()
                self._inflight = future

        if not leader:
            return future.result()

        try:
            result = self._load()
        except Exception as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
        finally:
            with self._lock:
                self._inflight = None
        return result

    def _load(self) -> RefreshResult:
        try:
            entries = self._fetch_catalog()
        except DataSourceError as e:
            return RefreshFailed(e)
        except Exception as e:
            return RefreshFailed(DataSourceError(self.source, f"failed to fetch ticker catalog: {e}"))

        catalog = TickerCatalog(
            entries=MappingProxyType({ticker.upper(): rec for ticker, rec in entries.items()}),
            loaded_at=self._clock(),
        )
        with self._lock:
            self._catalog = catalog
        logger.info(f"Ticker catalog refreshed with {len(catalog)} entries")

        conflicts = self.static_table_conflicts()
        if conflicts:
            logger.warning(f"Static CIK table disagrees with SEC catalog for: {sorted(conflicts)}")
        return RefreshOk(catalog, fetched=True)

    def static_table_conflicts(self) -> dict[str, tuple[str, str]]:
        """Tickers whose static CIK differs from the loaded catalog: ticker -> (static, catalog)."""
        catalog = self._catalog
        if not isinstance(catalog, TickerCatalog):
            return {}

        conflicts = {}
        for ticker, cik in self._static.items():
            record = catalog.get(ticker)
            if record and record.cik != cik:
                conflicts[ticker] = (cik, record.cik)
        return conflicts

    def get_catalog(self) -> TickerCatalog:
        """Current catalog snapshot, refreshing it first if needed."""
        error = self.ensure_fresh()
        catalog = self._catalog
        if isinstance(catalog, TickerCatalog):
            return catalog
        raise error or DataSourceError(self.source, "ticker catalog not loaded")
