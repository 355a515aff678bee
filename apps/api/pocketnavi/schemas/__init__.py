"""Pydantic response schemas."""

from pocketnavi.schemas.search import (
    ArchitectCreditResponse,
    BuildingSearchResult,
    PaginationResponse,
    SearchPageResponse,
)
from pocketnavi.schemas.catalog import (
    ArchitectResponse,
    BuildingDetailResponse,
    BuildingSummaryResponse,
)

__all__ = [
    "ArchitectCreditResponse",
    "BuildingSearchResult",
    "PaginationResponse",
    "SearchPageResponse",
    "ArchitectResponse",
    "BuildingDetailResponse",
    "BuildingSummaryResponse",
]
