import logging

from pocketnavi.core.config import SearchConfig
from pocketnavi.core.constants import BUILDING_SEARCH_COLUMNS, BUILDINGS_TABLE, SEARCHABLE_FIELDS
from pocketnavi.providers.predicates import AnyOf, contains_any_field
from pocketnavi.providers.store import OrderBy, RecordStore, StoreError
from pocketnavi.serializers import row_to_building

from .base import Candidate, Deadline, MatchPage
from .fallback import FallbackController
from .text import match_candidates

logger = logging.getLogger(__name__)

# Stable paging for stores without a rank
_PREDICATE_ORDER = (OrderBy("building_id"),)


def term_predicate(term: str) -> AnyOf:
    """OR of every candidate string of `term` against every searchable field."""
    return contains_any_field(SEARCHABLE_FIELDS, match_candidates(term))


class FieldMatcher:
    """Single-term matching: ranked full-text, then the OR predicate query, then the fallback tier."""

    def __init__(self, store: RecordStore, config: SearchConfig, fallback: FallbackController | None = None):
        self.store = store
        self.config = config
        self.fallback = fallback or FallbackController(store, config)

    async def match(self, term: str, limit: int, offset: int, deadline: Deadline) -> MatchPage:
        if not term:
            return MatchPage.empty()

        if self.store.supports_ranked_search:
            page = await self._fulltext(term, limit, offset, deadline)
            if page is not None:
                return page

        try:
            result = await self.store.query(
                BUILDINGS_TABLE,
                term_predicate(term),
                BUILDING_SEARCH_COLUMNS,
                limit=limit,
                offset=offset,
                order_by=_PREDICATE_ORDER,
                timeout=deadline.cap(self.config.store_timeout_seconds),
            )
        except StoreError as e:
            logger.warning(
                "Predicate query failed term=%r store=%s, switching to per-field fallback: %s",
                term,
                self.store.name,
                e,
            )
            return await self.fallback.match(term, limit, offset, deadline)

        try:
            candidates = [Candidate(building=row_to_building(r)) for r in result.rows]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "Predicate query returned malformed rows term=%r store=%s, switching to per-field fallback: %r",
                term,
                self.store.name,
                e,
            )
            return await self.fallback.match(term, limit, offset, deadline)
        total = result.total if result.total is not None else len(candidates) + offset
        return MatchPage(candidates=candidates, total=total, ranked=False, path="predicate")

    async def _fulltext(self, term: str, limit: int, offset: int, deadline: Deadline) -> MatchPage | None:
        """Ranked page, or None when the predicate path should take over."""
        try:
            result = await self.store.search(
                term, limit, offset, timeout=deadline.cap(self.config.store_timeout_seconds)
            )
        except StoreError as e:
            logger.warning("Full-text search failed term=%r store=%s: %s", term, self.store.name, e)
            return None
        if result.total == 0 and not result.rows and self.config.fulltext_empty_fallthrough:
            # `simple` tokenization keeps unspaced Japanese as one lexeme; substring matching still finds it
            logger.info("Full-text search empty term=%r, trying substring match", term)
            return None
        try:
            candidates = [
                Candidate(building=row_to_building(r), rank=float(r.get("rank") or 0.0)) for r in result.rows
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Full-text search returned malformed rows term=%r store=%s: %r", term, self.store.name, e)
            return None
        return MatchPage(candidates=candidates, total=result.total, ranked=True, path="fulltext")
