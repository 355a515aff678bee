"""Fallback tier: one narrow store query per searchable field and case variant, merged locally.

Used when the combined OR query fails. Each call is small and gets its own short timeout,
so one slow or rejected field does not sink the whole search.
"""

import asyncio
import logging

from pocketnavi.core.config import SearchConfig
from pocketnavi.core.constants import BUILDING_SEARCH_COLUMNS, BUILDINGS_TABLE, SEARCHABLE_FIELDS
from pocketnavi.providers.predicates import Contains
from pocketnavi.providers.store import QueryPage, RecordStore
from pocketnavi.serializers import row_to_building

from .base import Candidate, Deadline, DeadlineExceeded, MatchPage, gather_within
from .text import case_variants

logger = logging.getLogger(__name__)


def plan_calls(term: str) -> list[tuple[str, str]]:
    """(field, variant) pairs, field-major then variant. Merge order follows this plan."""
    variants = case_variants(term)
    return [(f, v) for f in SEARCHABLE_FIELDS for v in variants]


class FallbackController:
    def __init__(self, store: RecordStore, config: SearchConfig):
        self.store = store
        self.config = config

    async def match(self, term: str, limit: int, offset: int, deadline: Deadline) -> MatchPage:
        plan = plan_calls(term)
        if not plan:
            return MatchPage.empty()
        # at least fallback_window rows per call, so every page sees the same merged total
        window = max(self.config.fallback_window, offset + limit)
        timeout = self.config.fallback_timeout_seconds

        def _call(field: str, variant: str):
            return lambda: self.store.query(
                BUILDINGS_TABLE,
                Contains(field, variant),
                BUILDING_SEARCH_COLUMNS,
                limit=window,
                timeout=deadline.cap(timeout),
            )

        outcomes = await gather_within(
            [_call(f, v) for f, v in plan],
            semaphore=asyncio.Semaphore(self.config.max_concurrency),
            deadline=deadline,
        )

        seen: set[str] = set()
        merged: list[Candidate] = []
        failed = 0
        for (field, variant), outcome in zip(plan, outcomes):
            if isinstance(outcome, BaseException):
                failed += 1
                if isinstance(outcome, DeadlineExceeded):
                    logger.warning("Fallback call skipped at deadline term=%r field=%s variant=%r", term, field, variant)
                else:
                    logger.warning(
                        "Fallback call failed term=%r field=%s variant=%r: %s", term, field, variant, outcome
                    )
                continue
            if not isinstance(outcome, QueryPage):
                continue
            try:
                buildings = [row_to_building(row) for row in outcome.rows]
            except (KeyError, TypeError, ValueError) as e:
                failed += 1
                logger.warning("Fallback call returned malformed rows term=%r field=%s variant=%r: %r",
                               term, field, variant, e)
                continue
            for building in buildings:
                key = str(building.building_id)
                if key in seen:
                    continue
                seen.add(key)
                merged.append(Candidate(building=building))

        logger.info(
            "Fallback merged term=%r calls=%s failed=%s unique=%s", term, len(plan), failed, len(merged)
        )
        return MatchPage(
            candidates=merged[offset:offset + limit],
            total=len(merged),
            ranked=False,
            path="fallback",
        )
