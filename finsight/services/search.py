"""Fuzzy ticker / company name search over the SEC ticker catalog."""

import logging
from difflib import SequenceMatcher

from finsight.models import TickerRecord
from finsight.services.cik_resolver import CikResolver

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
FUZZY_CUTOFF = 0.6


def _rank(query: str, record: TickerRecord) -> tuple[int, float]:
    """Sort key: match tier first (lower is better), then similarity (higher is better)."""
    name = record.name.upper()
    if record.ticker == query:
        return 0, 1.0
    if record.ticker.startswith(query):
        return 1, len(query) / len(record.ticker)
    if name.startswith(query):
        return 2, len(query) / max(len(name), 1)
    if query in name:
        return 3, len(query) / max(len(name), 1)

    # Best of ticker-vs-query and each name word-vs-query
    candidates = [record.ticker] + name.split()
    score = max(SequenceMatcher(None, query, c).ratio() for c in candidates)
    return 4, score


class TickerSearch:
    """Search engine backed by the resolver's catalog snapshot."""

    def __init__(self, resolver: CikResolver):
        self.resolver = resolver

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[TickerRecord]:
        query = query.strip().upper()
        if not query:
            return []
        limit = max(1, min(limit, MAX_LIMIT))

        records = self.resolver.get_catalog().entries.values()

        scored = []
        for record in records:
            tier, score = _rank(query, record)
            if tier == 4 and score < FUZZY_CUTOFF:
                continue
            scored.append((tier, -score, record.ticker, record))

        scored.sort(key=lambda item: item[:3])
        return [item[3] for item in scored[:limit]]

