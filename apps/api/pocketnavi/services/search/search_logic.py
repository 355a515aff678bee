"""Search pipeline business logic.

Pipeline: normalize query -> split terms -> pick strategy (single term | AND over a window)
-> field matcher (ranked full-text -> OR predicate query -> per-field fallback tier)
-> relevance + stable ordering -> architect credits for the page.

Every store failure is absorbed on the way; the worst outcome is an empty response.
"""

import logging
from dataclasses import replace

from pocketnavi.core.config import SearchConfig
from pocketnavi.domain import SearchResponse, SearchResult
from pocketnavi.providers.store import RecordStore

from .base import Deadline, MatchPage
from .fallback import FallbackController
from .matcher import FieldMatcher
from .ranking import rank_results, relevance_of
from .relations import RelationResolver
from .strategies import select_strategy
from .text import build_search_query

logger = logging.getLogger(__name__)


class SearchEngine:
    """Building search over a RecordStore. Holds no per-request state."""

    def __init__(self, store: RecordStore, config: SearchConfig):
        self.store = store
        self.config = config
        self.matcher = FieldMatcher(store, config, FallbackController(store, config))
        self.relations = RelationResolver(store, config.relation_timeout_seconds)

    async def search_buildings(self, query: str | None, limit: int, offset: int = 0) -> SearchResponse:
        """Search buildings by free text. Never raises."""
        parsed = build_search_query(query)
        if parsed.is_empty:
            return SearchResponse.empty()
        limit = max(0, int(limit))
        offset = max(0, int(offset))
        if limit == 0:
            return SearchResponse.empty()

        strategy = select_strategy(parsed.terms, self.matcher, self.config)
        deadline = Deadline(self.config.search_budget_seconds)
        try:
            page = await strategy.match(parsed.terms, limit, offset, deadline)
        except Exception:
            logger.exception(
                "Search failed query=%r terms=%s strategy=%s store=%s",
                parsed.normalized,
                len(parsed.terms),
                strategy.name,
                self.store.name,
            )
            return SearchResponse.empty()

        results = await self._to_results(page, deadline)
        logger.info(
            "Search query=%r terms=%s strategy=%s path=%s results=%s total=%s",
            parsed.normalized,
            len(parsed.terms),
            strategy.name,
            page.path,
            len(results),
            page.total,
        )
        return SearchResponse(results=results, total=page.total)

    async def _to_results(self, page: MatchPage, deadline: Deadline) -> list[SearchResult]:
        seen: set[str] = set()
        results: list[SearchResult] = []
        for c in page.candidates:
            key = str(c.building_id)
            if key in seen:
                continue
            seen.add(key)
            results.append(SearchResult(building=c.building, relevance=relevance_of(c)))
        if not results:
            return []

        try:
            credits = await self.relations.resolve([r.building_id for r in results], deadline)
        except Exception:
            logger.exception("Architect resolution failed for %s results", len(results))
            credits = {}
        enriched = [
            replace(r, building=replace(r.building, architects=tuple(credits.get(str(r.building_id), []))))
            for r in results
        ]
        return rank_results(enriched)
