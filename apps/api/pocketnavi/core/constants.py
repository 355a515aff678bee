"""Shared API constants: store table names and the searchable field set."""

BUILDINGS_TABLE = "buildings_table_2"
BUILDING_ARCHITECTS_TABLE = "building_architects"
ARCHITECT_COMPOSITIONS_TABLE = "architect_compositions"
INDIVIDUAL_ARCHITECTS_TABLE = "individual_architects"

# Store column holding the English location; exposed as "locationEn" in the projection
LOCATION_EN_COLUMN = "locationEn_from_datasheetChunkEn"

# Order matters: fallback calls are planned field-major in this order
SEARCHABLE_FIELDS: tuple[str, ...] = (
    "title",
    "titleEn",
    "buildingTypes",
    "buildingTypesEn",
    "location",
    LOCATION_EN_COLUMN,
)

BUILDING_SEARCH_COLUMNS: tuple[str, ...] = (
    "building_id",
    "slug",
    "title",
    "titleEn",
    "buildingTypes",
    "buildingTypesEn",
    "location",
    LOCATION_EN_COLUMN,
    "completionYears",
    "lat",
    "lng",
)

BUILDING_DETAIL_COLUMNS: tuple[str, ...] = BUILDING_SEARCH_COLUMNS + (
    "description",
    "history",
    "technical_info",
)

ARCHITECT_CREDIT_COLUMNS: tuple[str, ...] = ("individual_architect_id", "name_ja", "name_en", "slug")

ARCHITECT_DETAIL_COLUMNS: tuple[str, ...] = ARCHITECT_CREDIT_COLUMNS + (
    "birth_year",
    "death_year",
    "biography",
    "awards",
)

# Relevance assigned when the store cannot rank (predicate / fallback paths)
UNRANKED_RELEVANCE = 1.0
