import asyncio
import re
from typing import Any, Callable, Sequence

import pytest

from pocketnavi.core.config import SearchConfig
from pocketnavi.core.constants import (
    ARCHITECT_COMPOSITIONS_TABLE,
    BUILDING_ARCHITECTS_TABLE,
    BUILDINGS_TABLE,
    INDIVIDUAL_ARCHITECTS_TABLE,
    LOCATION_EN_COLUMN,
    SEARCHABLE_FIELDS,
)
from pocketnavi.providers.predicates import Predicate, evaluate
from pocketnavi.providers.store import OrderBy, QueryPage, RankedPage, RecordStore, StoreError

_TOKEN_SPLIT = re.compile(r"[\s,]+")


class FakeRecordStore(RecordStore):
    """In-memory store. Predicates are evaluated locally; failures are injected per call.

    Ranked search matches whole whitespace/comma separated tokens (like Postgres `simple`),
    so unspaced Japanese text only matches as a complete field value.
    """

    name = "fake"

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]],
        *,
        ranked: bool = False,
        search_error: StoreError | None = None,
        query_hook: Callable[[str, Predicate | None], Any] | None = None,
        rows_hook: Callable[[str, Predicate | None, list[dict[str, Any]]], list[Any]] | None = None,
    ):
        self.tables = {k: [dict(r) for r in v] for k, v in tables.items()}
        self.ranked = ranked
        self.search_error = search_error
        self.query_hook = query_hook
        self.rows_hook = rows_hook
        self.search_calls: list[tuple[str, int, int]] = []
        self.query_calls: list[dict[str, Any]] = []
        self.closed = False

    @property
    def supports_ranked_search(self) -> bool:
        return self.ranked

    async def search(self, query_text: str, limit: int, offset: int, *, timeout: float) -> RankedPage:
        self.search_calls.append((query_text, limit, offset))
        if self.search_error is not None:
            raise self.search_error
        tokens = [t for t in query_text.lower().split() if t]
        scored = []
        for row in self.tables.get(BUILDINGS_TABLE, []):
            row_tokens = set()
            for text in [row.get(f) for f in SEARCHABLE_FIELDS] + self._architect_names(row["building_id"]):
                row_tokens.update(t for t in _TOKEN_SPLIT.split((text or "").lower()) if t)
            hits = sum(1 for t in tokens if t in row_tokens)
            if tokens and hits == len(tokens):
                scored.append((hits / (hits + len(row_tokens)), row))
        scored.sort(key=lambda s: (-s[0], s[1]["building_id"]))
        rows = [dict(r, rank=score) for score, r in scored[offset:offset + limit]]
        return RankedPage(rows=rows, total=len(scored))

    def _architect_names(self, building_id) -> list[str]:
        """Names of every individual credited on the building, part of the ranked document."""
        groups = {
            r["architect_id"]
            for r in self.tables.get(BUILDING_ARCHITECTS_TABLE, [])
            if r["building_id"] == building_id
        }
        members = {
            r["individual_architect_id"]
            for r in self.tables.get(ARCHITECT_COMPOSITIONS_TABLE, [])
            if r["architect_id"] in groups
        }
        names = []
        for r in self.tables.get(INDIVIDUAL_ARCHITECTS_TABLE, []):
            if r["individual_architect_id"] in members:
                names.extend([r.get("name_ja"), r.get("name_en")])
        return names

    async def query(
        self,
        table: str,
        predicate: Predicate | None,
        fields: Sequence[str],
        *,
        limit: int | None = None,
        offset: int = 0,
        order_by: Sequence[OrderBy] = (),
        timeout: float,
    ) -> QueryPage:
        self.query_calls.append(
            {"table": table, "predicate": predicate, "limit": limit, "offset": offset, "timeout": timeout}
        )
        if self.query_hook is not None:
            result = self.query_hook(table, predicate)
            if asyncio.iscoroutine(result):
                result = await result
            if isinstance(result, BaseException):
                raise result
        rows = [r for r in self.tables.get(table, []) if predicate is None or evaluate(predicate, r)]
        for o in reversed(list(order_by)):
            rows.sort(key=lambda r: (r.get(o.field) is None, r.get(o.field)), reverse=o.descending)
        total = len(rows)
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        projected = [{f: r.get(f) for f in fields} for r in rows]
        if self.rows_hook is not None:
            projected = self.rows_hook(table, predicate, projected)
        return QueryPage(rows=projected, total=total)

    async def aclose(self) -> None:
        self.closed = True


def _building(building_id, slug, title, title_en, types, types_en, location, location_en, year):
    return {
        "building_id": building_id,
        "slug": slug,
        "title": title,
        "titleEn": title_en,
        "buildingTypes": types,
        "buildingTypesEn": types_en,
        "location": location,
        LOCATION_EN_COLUMN: location_en,
        "completionYears": year,
        "lat": 35.0,
        "lng": 135.0,
        "description": None,
        "history": None,
        "technical_info": None,
    }


BUILDINGS = [
    _building(1, "church-of-the-light", "光の教会", "Church of the Light", "教会", "Church",
              "大阪府茨木市", "Ibaraki, Osaka", "1989"),
    _building(2, "church-on-the-water", "水の教会", "Church on the Water", "教会", "Church",
              "北海道占冠村", "Shimukappu, Hokkaido", "1988"),
    _building(3, "kanazawa-21", "金沢21世紀美術館", "21st Century Museum, Kanazawa", "美術館", "Museum",
              "石川県金沢市", "Kanazawa, Ishikawa", "2004"),
    _building(4, "ando-memorial-church", "安藤記念教会", "Ando Memorial Church", "教会", "Church",
              "東京都港区", "Minato, Tokyo", "1917"),
    _building(5, "osaka-station-city", "大阪ステーションシティ", "Osaka Station City", "駅,商業施設",
              "Station,Commercial", "大阪府大阪市", "Osaka", "2011"),
    _building(6, "kirin-plaza", "キリンプラザ大阪", "Kirin Plaza Osaka", "商業施設", "Commercial",
              "大阪府大阪市", "Osaka", "1987"),
    _building(7, "sumiyoshi-row-house", "住吉の長屋", "Row House in Sumiyoshi", "住宅", "House",
              "大阪府大阪市住吉区", "Sumiyoshi, Osaka", "1976"),
]

INDIVIDUAL_ARCHITECTS = [
    {"individual_architect_id": 10, "slug": "tadao-ando", "name_ja": "安藤忠雄", "name_en": "Tadao Ando",
     "birth_year": "1941", "death_year": None, "biography": None, "awards": "Pritzker Prize"},
    {"individual_architect_id": 11, "slug": "kazuyo-sejima", "name_ja": "妹島和世", "name_en": "Kazuyo Sejima",
     "birth_year": "1956", "death_year": None, "biography": None, "awards": None},
    {"individual_architect_id": 12, "slug": "ryue-nishizawa", "name_ja": "西沢立衛", "name_en": "Ryue Nishizawa",
     "birth_year": "1966", "death_year": None, "biography": None, "awards": None},
]

# Group 102 (SANAA) lists Nishizawa first in storage; order_index puts Sejima first
ARCHITECT_COMPOSITIONS = [
    {"architect_id": 101, "individual_architect_id": 10, "order_index": 1},
    {"architect_id": 102, "individual_architect_id": 12, "order_index": 2},
    {"architect_id": 102, "individual_architect_id": 11, "order_index": 1},
]

BUILDING_ARCHITECTS = [
    {"building_id": 1, "architect_id": 101},
    {"building_id": 2, "architect_id": 101},
    {"building_id": 3, "architect_id": 102},
    {"building_id": 7, "architect_id": 101},
]


def catalog_tables() -> dict[str, list[dict[str, Any]]]:
    return {
        BUILDINGS_TABLE: BUILDINGS,
        INDIVIDUAL_ARCHITECTS_TABLE: INDIVIDUAL_ARCHITECTS,
        ARCHITECT_COMPOSITIONS_TABLE: ARCHITECT_COMPOSITIONS,
        BUILDING_ARCHITECTS_TABLE: BUILDING_ARCHITECTS,
    }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config() -> SearchConfig:
    return SearchConfig(
        page_size=10,
        and_candidate_window=50,
        max_concurrency=4,
        store_timeout_seconds=2.0,
        fallback_timeout_seconds=1.0,
        relation_timeout_seconds=1.0,
        search_budget_seconds=5.0,
    )


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore(catalog_tables())


@pytest.fixture
def ranked_store() -> FakeRecordStore:
    return FakeRecordStore(catalog_tables(), ranked=True)
