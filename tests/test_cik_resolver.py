"""Tests for ticker -> CIK resolution and catalog caching."""

import threading
import time

import pytest

from finsight.errors import DataSourceError, TickerNotFoundError
from finsight.services.cik_resolver import (
    COMMON_CIKS,
    NO_CATALOG,
    CikResolver,
    RefreshFailed,
    RefreshOk,
    TickerCatalog,
)

from conftest import CatalogFetcher, record

DAY = 24 * 3600


@pytest.mark.parametrize("ticker", sorted(COMMON_CIKS))
def test_static_tickers_resolve_without_fetch(ticker, resolver, fetcher):
    """Every static-table ticker resolves without touching the SEC catalog."""
    assert resolver.resolve(ticker) == COMMON_CIKS[ticker]
    assert fetcher.calls == 0
    assert resolver.catalog is NO_CATALOG


def test_ticker_is_normalized(resolver):
    """Lookups are case and whitespace insensitive."""
    assert resolver.resolve("  aapl ") == "0000320193"


def test_catalog_lookup_loads_once(resolver, fetcher):
    """A non-static ticker loads the catalog, later lookups reuse it."""
    assert resolver.resolve("IBM") == "0000051143"
    assert resolver.resolve("KO") == "0000021344"
    assert fetcher.calls == 1


def test_fresh_catalog_is_not_refetched(resolver, fetcher, clock):
    """Within the TTL the freshness check does not hit the network."""
    resolver.resolve("IBM")
    clock.advance(DAY - 1)

    with pytest.raises(TickerNotFoundError):
        resolver.resolve("NEWCO")
    assert fetcher.calls == 1


def test_stale_catalog_is_refreshed(resolver, fetcher, clock):
    """A ticker listed upstream becomes resolvable once the TTL elapses."""
    resolver.resolve("IBM")
    fetcher.catalog["NEWCO"] = record("NEWCO", "0009999999")

    with pytest.raises(TickerNotFoundError):
        resolver.resolve("NEWCO")

    clock.advance(DAY + 1)
    assert resolver.resolve("NEWCO") == "0009999999"
    assert fetcher.calls == 2


def test_memo_cache_survives_catalog_changes(resolver, fetcher, clock):
    """Once resolved, a ticker keeps its CIK for the life of the resolver."""
    assert resolver.resolve("IBM") == "0000051143"

    fetcher.catalog.pop("IBM")
    clock.advance(DAY + 1)
    assert resolver.resolve("IBM") == "0000051143"
    # Memo hit short-circuits before the freshness check
    assert fetcher.calls == 1


def test_failed_refresh_keeps_stale_catalog(resolver, fetcher, clock):
    """Refresh failure with a previous catalog falls back to that catalog."""
    resolver.resolve("IBM")
    loaded = resolver.catalog

    fetcher.error = DataSourceError("EDGAR", "503 Service Unavailable")
    clock.advance(DAY + 1)

    assert resolver.resolve("KO") == "0000021344"
    assert resolver.catalog is loaded
    assert fetcher.calls == 2


def test_failed_refresh_still_reports_unknown_ticker(resolver, fetcher, clock):
    """With a stale catalog, an unknown ticker is a not-found, not the fetch error."""
    resolver.resolve("IBM")
    fetcher.error = DataSourceError("EDGAR", "timeout")
    clock.advance(DAY + 1)

    with pytest.raises(TickerNotFoundError) as exc_info:
        resolver.resolve("NOPE")
    assert exc_info.value.ticker == "NOPE"


def test_failed_refresh_retried_on_next_lookup(resolver, fetcher, clock):
    """A stale catalog is retried on the following miss, not pinned."""
    resolver.resolve("IBM")
    fetcher.error = DataSourceError("EDGAR", "timeout")
    clock.advance(DAY + 1)
    resolver.resolve("KO")

    fetcher.error = None
    fetcher.catalog["NEWCO"] = record("NEWCO", "0009999999")
    assert resolver.resolve("NEWCO") == "0009999999"
    assert fetcher.calls == 3


def test_no_catalog_fetch_error_propagates(clock):
    """Without any catalog, a miss surfaces the fetch failure."""
    fetcher = CatalogFetcher()
    fetcher.error = DataSourceError("EDGAR", "connection refused")
    resolver = CikResolver(fetcher, clock=clock)

    with pytest.raises(DataSourceError) as exc_info:
        resolver.resolve("IBM")
    assert not isinstance(exc_info.value, TickerNotFoundError)
    assert "connection refused" in str(exc_info.value)


def test_no_catalog_static_hit_preferred_over_fetch_error(clock):
    """Static hits still resolve while the catalog cannot be loaded."""
    fetcher = CatalogFetcher()
    fetcher.error = DataSourceError("EDGAR", "connection refused")
    resolver = CikResolver(fetcher, clock=clock)

    assert resolver.resolve("MSFT") == "0000789019"


def test_unexpected_fetch_exception_is_wrapped(clock):
    """Non-provider exceptions from the fetcher become DataSourceError."""
    fetcher = CatalogFetcher()
    fetcher.error = ValueError("bad json")
    resolver = CikResolver(fetcher, clock=clock)

    result = resolver.refresh()
    assert isinstance(result, RefreshFailed)
    assert result.error.source == "EDGAR"
    assert "bad json" in result.error.message


def test_unknown_ticker_with_fresh_catalog(resolver, fetcher):
    """Unknown everywhere -> TickerNotFoundError tagged with ticker and source."""
    with pytest.raises(TickerNotFoundError) as exc_info:
        resolver.resolve("zzzz")

    error = exc_info.value
    assert error.ticker == "ZZZZ"
    assert error.source == "EDGAR"
    assert error.code == "CIK_NOT_FOUND"
    assert fetcher.calls == 1


def test_refresh_result_types(resolver, fetcher, clock):
    """refresh() reports whether a fetch happened."""
    first = resolver.refresh()
    assert isinstance(first, RefreshOk) and first.fetched

    second = resolver.refresh()
    assert isinstance(second, RefreshOk) and not second.fetched
    assert second.catalog is first.catalog

    forced = resolver.refresh(force=True)
    assert forced.fetched
    assert fetcher.calls == 2


def test_catalog_snapshot_is_read_only(resolver):
    """Catalog snapshots cannot be mutated in place."""
    catalog = resolver.get_catalog()
    assert isinstance(catalog, TickerCatalog)
    with pytest.raises(TypeError):
        catalog.entries["X"] = record("X", "0000000001")


def test_static_table_wins_over_catalog_conflict(clock):
    """A disagreeing catalog is reported, but the static CIK is returned."""
    fetcher = CatalogFetcher({"AAPL": record("AAPL", "0000000042")})
    resolver = CikResolver(fetcher, clock=clock)
    resolver.refresh()

    assert resolver.static_table_conflicts() == {"AAPL": ("0000320193", "0000000042")}
    assert resolver.resolve("AAPL") == "0000320193"


def test_custom_static_table(clock):
    """The static table is injectable."""
    fetcher = CatalogFetcher()
    resolver = CikResolver(fetcher, static_ciks={"abc": "0000000123"}, clock=clock)

    assert resolver.resolve("ABC") == "0000000123"
    with pytest.raises(TickerNotFoundError):
        resolver.resolve("AAPL")


def test_concurrent_refreshes_share_one_fetch(sec_catalog):
    """Concurrent cold lookups coalesce into a single catalog fetch."""
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow_fetch():
        calls.append(1)
        started.set()
        release.wait(5)
        return sec_catalog

    resolver = CikResolver(slow_fetch, static_ciks={})
    results = []
    errors = []

    def lookup():
        try:
            results.append(resolver.resolve("IBM"))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=lookup) for _ in range(8)]
    threads[0].start()
    assert started.wait(5)
    for t in threads[1:]:
        t.start()
    time.sleep(0.05)
    release.set()
    for t in threads:
        t.join(5)

    assert errors == []
    assert results == ["0000051143"] * 8
    assert len(calls) == 1


def test_static_ticker_skips_stale_refresh(resolver, fetcher, clock):
    """A stale catalog is not refreshed for a static-table lookup."""
    resolver.resolve("IBM")
    clock.advance(DAY + 1)

    assert resolver.resolve("NVDA") == "0001045810"
    assert fetcher.calls == 1
