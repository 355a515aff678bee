from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArchitectCreditResponse(BaseModel):
    name_ja: Optional[str] = None
    name_en: Optional[str] = None
    slug: Optional[str] = None


class BuildingSearchResult(BaseModel):
    """One search hit. Serialized with the camelCase keys the listing templates use."""

    model_config = ConfigDict(populate_by_name=True)

    building_id: int | str
    slug: str
    title: Optional[str] = None
    title_en: Optional[str] = Field(None, alias="titleEn")
    building_types: Optional[str] = Field(None, alias="buildingTypes")
    building_types_en: Optional[str] = Field(None, alias="buildingTypesEn")
    location: Optional[str] = None
    location_en: Optional[str] = Field(None, alias="locationEn")
    completion_years: Optional[str] = Field(None, alias="completionYears")
    lat: Optional[float] = None
    lng: Optional[float] = None
    architects: list[ArchitectCreditResponse] = []
    relevance: float = 1.0


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_results: int
    limit: int


class SearchPageResponse(BaseModel):
    results: list[BuildingSearchResult] = []
    pagination: PaginationResponse
