"""Term strategies: one term goes straight to the matcher; several terms are ANDed.

Multi-term AND is done locally over a candidate window because the store only offers
per-term OR matching. Two ways to build that window:

- windowed: candidates come from the first term only (fewest store calls).
- fanout: candidates are the union of every term's window (better recall, one matcher run per term).

Either way a record with all terms can be missed when it ranks outside the window.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Sequence

from pocketnavi.core.config import SearchConfig

from .base import Candidate, Deadline, MatchPage, gather_within
from .matcher import FieldMatcher

logger = logging.getLogger(__name__)


def contains_all(candidate: Candidate, terms: Sequence[str]) -> bool:
    return all(candidate.building.contains_term(t) for t in terms)


def paginate_candidates(candidates: list[Candidate], limit: int, offset: int) -> list[Candidate]:
    return candidates[offset:offset + limit]


class SearchStrategy(ABC):
    name: str = "strategy"

    @abstractmethod
    async def match(self, terms: Sequence[str], limit: int, offset: int, deadline: Deadline) -> MatchPage:
        pass


class SingleTermStrategy(SearchStrategy):
    name = "single"

    def __init__(self, matcher: FieldMatcher):
        self.matcher = matcher

    async def match(self, terms: Sequence[str], limit: int, offset: int, deadline: Deadline) -> MatchPage:
        if not terms:
            return MatchPage.empty()
        return await self.matcher.match(terms[0], limit, offset, deadline)


class WindowedAndStrategy(SearchStrategy):
    name = "windowed"

    def __init__(self, matcher: FieldMatcher, window: int):
        self.matcher = matcher
        self.window = window

    async def match(self, terms: Sequence[str], limit: int, offset: int, deadline: Deadline) -> MatchPage:
        if not terms:
            return MatchPage.empty()
        first, rest = terms[0], terms[1:]
        page = await self.matcher.match(first, self.window, 0, deadline)
        retained = [c for c in page.candidates if contains_all(c, rest)]
        logger.info(
            "AND window term=%r path=%s window=%s candidates=%s retained=%s",
            first,
            page.path,
            self.window,
            len(page.candidates),
            len(retained),
        )
        return MatchPage(
            candidates=paginate_candidates(retained, limit, offset),
            total=len(retained),
            ranked=page.ranked,
            path=page.path,
        )


class FanOutAndStrategy(SearchStrategy):
    name = "fanout"

    def __init__(self, matcher: FieldMatcher, window: int, max_concurrency: int):
        self.matcher = matcher
        self.window = window
        self.max_concurrency = max_concurrency

    async def match(self, terms: Sequence[str], limit: int, offset: int, deadline: Deadline) -> MatchPage:
        if not terms:
            return MatchPage.empty()
        outcomes = await gather_within(
            [lambda t=t: self.matcher.match(t, self.window, 0, deadline) for t in terms],
            semaphore=asyncio.Semaphore(self.max_concurrency),
            deadline=deadline,
        )
        seen: set[str] = set()
        union: list[Candidate] = []
        pages: list[MatchPage] = []
        for term, outcome in zip(terms, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("AND fan-out term=%r skipped: %s", term, outcome)
                continue
            pages.append(outcome)
            for c in outcome.candidates:
                key = str(c.building_id)
                if key not in seen:
                    seen.add(key)
                    union.append(c)
        retained = [c for c in union if contains_all(c, terms)]
        logger.info(
            "AND fan-out terms=%s union=%s retained=%s", len(terms), len(union), len(retained)
        )
        return MatchPage(
            candidates=paginate_candidates(retained, limit, offset),
            total=len(retained),
            ranked=bool(pages) and all(p.ranked for p in pages),
            path=pages[0].path if pages else "empty",
        )


def select_strategy(terms: Sequence[str], matcher: FieldMatcher, config: SearchConfig) -> SearchStrategy:
    if len(terms) <= 1:
        return SingleTermStrategy(matcher)
    if config.and_strategy == "fanout":
        return FanOutAndStrategy(matcher, config.and_candidate_window, config.max_concurrency)
    return WindowedAndStrategy(matcher, config.and_candidate_window)
