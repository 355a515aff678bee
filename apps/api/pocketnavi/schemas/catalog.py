from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocketnavi.schemas.search import ArchitectCreditResponse


class BuildingDetailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    building_id: int | str
    slug: str
    title: Optional[str] = None
    title_en: Optional[str] = Field(None, alias="titleEn")
    building_types: Optional[str] = Field(None, alias="buildingTypes")
    building_types_en: Optional[str] = Field(None, alias="buildingTypesEn")
    type_tags: list[str] = []
    type_tags_en: list[str] = []
    location: Optional[str] = None
    location_en: Optional[str] = Field(None, alias="locationEn")
    completion_years: Optional[str] = Field(None, alias="completionYears")
    lat: Optional[float] = None
    lng: Optional[float] = None
    description: Optional[str] = None
    history: Optional[str] = None
    technical_info: Optional[str] = None
    architects: list[ArchitectCreditResponse] = []


class BuildingSummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    building_id: int | str
    slug: str
    title: Optional[str] = None
    title_en: Optional[str] = Field(None, alias="titleEn")
    completion_years: Optional[str] = Field(None, alias="completionYears")
    location: Optional[str] = None


class ArchitectResponse(BaseModel):
    """Architect page: profile plus their buildings, newest first."""

    individual_architect_id: int | str
    slug: str
    name_ja: Optional[str] = None
    name_en: Optional[str] = None
    birth_year: Optional[str] = None
    death_year: Optional[str] = None
    biography: Optional[str] = None
    awards: Optional[str] = None
    buildings: list[BuildingSummaryResponse] = []
