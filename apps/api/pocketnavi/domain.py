"""
Domain types for the building catalog.
Typed entities flow through the search core; untyped rows exist only at the store boundary
(see pocketnavi.serializers).
"""

from dataclasses import dataclass, field
from typing import Optional


# -----------------------------------------------------------------------------
# 1. Catalog entities
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ArchitectCredit:
    """One individual architect as displayed on a building, in composition order."""
    name_ja: Optional[str]
    name_en: Optional[str]
    slug: Optional[str]


@dataclass(frozen=True)
class Building:
    building_id: int | str
    slug: str
    title: Optional[str] = None
    title_en: Optional[str] = None
    building_types: Optional[str] = None
    building_types_en: Optional[str] = None
    location: Optional[str] = None
    location_en: Optional[str] = None
    completion_years: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    description: Optional[str] = None
    history: Optional[str] = None
    technical_info: Optional[str] = None
    architects: tuple[ArchitectCredit, ...] = ()

    def searchable_values(self) -> tuple[str, ...]:
        """Values of the six searchable fields, in SEARCHABLE_FIELDS order (missing -> "")."""
        return (
            self.title or "",
            self.title_en or "",
            self.building_types or "",
            self.building_types_en or "",
            self.location or "",
            self.location_en or "",
        )

    def contains_term(self, term: str) -> bool:
        """Case-insensitive substring check of term against every searchable field."""
        needle = term.lower()
        return any(needle in value.lower() for value in self.searchable_values() if value)

    @property
    def type_tags(self) -> list[str]:
        return _split_tags(self.building_types)

    @property
    def type_tags_en(self) -> list[str]:
        return _split_tags(self.building_types_en)


@dataclass(frozen=True)
class BuildingSummary:
    """Building as listed on an architect page."""
    building_id: int | str
    slug: str
    title: Optional[str] = None
    title_en: Optional[str] = None
    completion_years: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class Architect:
    individual_architect_id: int | str
    slug: str
    name_ja: Optional[str] = None
    name_en: Optional[str] = None
    birth_year: Optional[str] = None
    death_year: Optional[str] = None
    biography: Optional[str] = None
    awards: Optional[str] = None
    buildings: tuple[BuildingSummary, ...] = ()


# -----------------------------------------------------------------------------
# 2. Search types
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchQuery:
    raw: str
    normalized: str
    terms: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.terms

    @property
    def is_multi_term(self) -> bool:
        return len(self.terms) > 1


@dataclass(frozen=True)
class SearchResult:
    building: Building
    relevance: float

    @property
    def building_id(self) -> int | str:
        return self.building.building_id


@dataclass(frozen=True)
class SearchResponse:
    results: list[SearchResult] = field(default_factory=list)
    total: int = 0

    @classmethod
    def empty(cls) -> "SearchResponse":
        return cls(results=[], total=0)


def _split_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]
