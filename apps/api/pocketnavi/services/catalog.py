"""Building and architect pages: lookups by slug.

Unlike search, store errors propagate here; routers map them to 404 / 503.
"""

import logging

from pocketnavi.core.constants import (
    ARCHITECT_COMPOSITIONS_TABLE,
    ARCHITECT_DETAIL_COLUMNS,
    BUILDING_ARCHITECTS_TABLE,
    BUILDING_DETAIL_COLUMNS,
    BUILDINGS_TABLE,
    INDIVIDUAL_ARCHITECTS_TABLE,
)
from pocketnavi.domain import Architect, Building
from pocketnavi.providers.predicates import Equals, in_
from pocketnavi.providers.store import OrderBy, RecordNotFound, RecordStore
from pocketnavi.serializers import row_to_architect, row_to_building, row_to_summary
from pocketnavi.services.search.relations import RelationResolver

logger = logging.getLogger(__name__)

_SUMMARY_COLUMNS = ("building_id", "slug", "title", "titleEn", "completionYears", "location")


class CatalogService:
    def __init__(self, store: RecordStore, timeout: float, relation_timeout: float):
        self.store = store
        self.timeout = timeout
        self.relations = RelationResolver(store, relation_timeout)

    async def get_building(self, slug: str) -> Building:
        """Building by slug with its architect credits. Raises RecordNotFound."""
        page = await self.store.query(
            BUILDINGS_TABLE, Equals("slug", slug), BUILDING_DETAIL_COLUMNS, limit=1, timeout=self.timeout
        )
        if not page.rows:
            raise RecordNotFound(f"Building not found: {slug}")
        row = page.rows[0]
        credits = await self.relations.resolve([row["building_id"]])
        return row_to_building(row, tuple(credits.get(str(row["building_id"]), [])))

    async def get_architect(self, slug: str) -> Architect:
        """Individual architect by slug with every building they are credited on, newest first."""
        page = await self.store.query(
            INDIVIDUAL_ARCHITECTS_TABLE, Equals("slug", slug), ARCHITECT_DETAIL_COLUMNS, limit=1, timeout=self.timeout
        )
        if not page.rows:
            raise RecordNotFound(f"Architect not found: {slug}")
        row = page.rows[0]
        individual_id = row["individual_architect_id"]

        compositions = await self.store.query(
            ARCHITECT_COMPOSITIONS_TABLE,
            Equals("individual_architect_id", individual_id),
            ("architect_id",),
            timeout=self.timeout,
        )
        group_ids = [r["architect_id"] for r in compositions.rows]
        if not group_ids:
            return row_to_architect(row)

        links = await self.store.query(
            BUILDING_ARCHITECTS_TABLE, in_("architect_id", group_ids), ("building_id",), timeout=self.timeout
        )
        building_ids = list(dict.fromkeys(r["building_id"] for r in links.rows))
        if not building_ids:
            return row_to_architect(row)

        buildings = await self.store.query(
            BUILDINGS_TABLE,
            in_("building_id", building_ids),
            _SUMMARY_COLUMNS,
            order_by=(OrderBy("completionYears", descending=True),),
            timeout=self.timeout,
        )
        logger.info("Architect slug=%s groups=%s buildings=%s", slug, len(group_ids), len(buildings.rows))
        return row_to_architect(row, tuple(row_to_summary(r) for r in buildings.rows))
