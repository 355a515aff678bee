"""Row-to-domain and domain-to-response mapping. Untyped store rows stop here."""

from typing import Any, Optional

from pocketnavi.core.constants import LOCATION_EN_COLUMN
from pocketnavi.domain import (
    Architect,
    ArchitectCredit,
    Building,
    BuildingSummary,
    SearchResult,
)
from pocketnavi.schemas import (
    ArchitectCreditResponse,
    ArchitectResponse,
    BuildingDetailResponse,
    BuildingSearchResult,
    BuildingSummaryResponse,
)


def _str(v: Any) -> Optional[str]:
    if v is None:
        return None
    return v if isinstance(v, str) else str(v)


def _float(v: Any) -> Optional[float]:
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def row_to_building(row: dict[str, Any], architects: tuple[ArchitectCredit, ...] = ()) -> Building:
    return Building(
        building_id=row["building_id"],
        slug=_str(row.get("slug")) or "",
        title=_str(row.get("title")),
        title_en=_str(row.get("titleEn")),
        building_types=_str(row.get("buildingTypes")),
        building_types_en=_str(row.get("buildingTypesEn")),
        location=_str(row.get("location")),
        location_en=_str(row.get(LOCATION_EN_COLUMN, row.get("locationEn"))),
        completion_years=_str(row.get("completionYears")),
        lat=_float(row.get("lat")),
        lng=_float(row.get("lng")),
        description=_str(row.get("description")),
        history=_str(row.get("history")),
        technical_info=_str(row.get("technical_info")),
        architects=architects,
    )


def row_to_credit(row: dict[str, Any]) -> ArchitectCredit:
    return ArchitectCredit(
        name_ja=_str(row.get("name_ja")),
        name_en=_str(row.get("name_en")),
        slug=_str(row.get("slug")),
    )


def row_to_summary(row: dict[str, Any]) -> BuildingSummary:
    return BuildingSummary(
        building_id=row["building_id"],
        slug=_str(row.get("slug")) or "",
        title=_str(row.get("title")),
        title_en=_str(row.get("titleEn")),
        completion_years=_str(row.get("completionYears")),
        location=_str(row.get("location")),
    )


def row_to_architect(row: dict[str, Any], buildings: tuple[BuildingSummary, ...] = ()) -> Architect:
    return Architect(
        individual_architect_id=row["individual_architect_id"],
        slug=_str(row.get("slug")) or "",
        name_ja=_str(row.get("name_ja")),
        name_en=_str(row.get("name_en")),
        birth_year=_str(row.get("birth_year")),
        death_year=_str(row.get("death_year")),
        biography=_str(row.get("biography")),
        awards=_str(row.get("awards")),
        buildings=buildings,
    )


def credit_to_response(credit: ArchitectCredit) -> ArchitectCreditResponse:
    return ArchitectCreditResponse(name_ja=credit.name_ja, name_en=credit.name_en, slug=credit.slug)


def search_result_to_response(result: SearchResult) -> BuildingSearchResult:
    """Map SearchResult to the projection the listing page renders."""
    b = result.building
    return BuildingSearchResult(
        building_id=b.building_id,
        slug=b.slug,
        title=b.title,
        title_en=b.title_en,
        building_types=b.building_types,
        building_types_en=b.building_types_en,
        location=b.location,
        location_en=b.location_en,
        completion_years=b.completion_years,
        lat=b.lat,
        lng=b.lng,
        architects=[credit_to_response(c) for c in b.architects],
        relevance=result.relevance,
    )


def building_to_detail_response(b: Building) -> BuildingDetailResponse:
    return BuildingDetailResponse(
        building_id=b.building_id,
        slug=b.slug,
        title=b.title,
        title_en=b.title_en,
        building_types=b.building_types,
        building_types_en=b.building_types_en,
        type_tags=b.type_tags,
        type_tags_en=b.type_tags_en,
        location=b.location,
        location_en=b.location_en,
        completion_years=b.completion_years,
        lat=b.lat,
        lng=b.lng,
        description=b.description,
        history=b.history,
        technical_info=b.technical_info,
        architects=[credit_to_response(c) for c in b.architects],
    )


def architect_to_response(a: Architect) -> ArchitectResponse:
    return ArchitectResponse(
        individual_architect_id=a.individual_architect_id,
        slug=a.slug,
        name_ja=a.name_ja,
        name_en=a.name_en,
        birth_year=a.birth_year,
        death_year=a.death_year,
        biography=a.biography,
        awards=a.awards,
        buildings=[
            BuildingSummaryResponse(
                building_id=s.building_id,
                slug=s.slug,
                title=s.title,
                title_en=s.title_en,
                completion_years=s.completion_years,
                location=s.location,
            )
            for s in a.buildings
        ],
    )
