import math

from pocketnavi.core.constants import UNRANKED_RELEVANCE
from pocketnavi.domain import SearchResult

from .base import Candidate


def relevance_of(candidate: Candidate) -> float:
    """Store rank clamped to [0, 1]; unranked paths get the constant."""
    if candidate.rank is None:
        return UNRANKED_RELEVANCE
    return min(1.0, max(0.0, float(candidate.rank)))


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    # sorted() is stable: ties keep store order
    return sorted(results, key=lambda r: -r.relevance)


def page_to_offset(page: int | None, page_size: int) -> tuple[int, int]:
    """(clamped page, offset). Pages start at 1."""
    current = max(1, int(page or 1))
    return current, (current - 1) * page_size


def total_pages(total: int, page_size: int) -> int:
    if total <= 0 or page_size <= 0:
        return 0
    return math.ceil(total / page_size)
