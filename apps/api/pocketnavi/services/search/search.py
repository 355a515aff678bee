"""Search service facade.

Business logic is split across:
- search pipeline: pocketnavi.services.search.search_logic
- building / architect pages: pocketnavi.services.catalog
"""

from pocketnavi.core.config import SearchConfig
from pocketnavi.domain import Architect, Building
from pocketnavi.providers.store import RecordStore
from pocketnavi.schemas import PaginationResponse, SearchPageResponse
from pocketnavi.serializers import search_result_to_response
from pocketnavi.services.catalog import CatalogService

from .ranking import page_to_offset, total_pages
from .search_logic import SearchEngine


class SearchService:
    """Facade for search and catalog operations. One instance per app, built at startup."""

    def __init__(self, store: RecordStore, config: SearchConfig):
        self.store = store
        self.config = config
        self.engine = SearchEngine(store, config)
        self.catalog = CatalogService(store, config.store_timeout_seconds, config.relation_timeout_seconds)

    async def search_page(self, query: str | None, page: int | None = 1) -> SearchPageResponse:
        """One page of results plus pagination metadata (page is clamped to >= 1)."""
        page_size = self.config.page_size
        current, offset = page_to_offset(page, page_size)
        response = await self.engine.search_buildings(query, page_size, offset)
        return SearchPageResponse(
            results=[search_result_to_response(r) for r in response.results],
            pagination=PaginationResponse(
                current_page=current,
                total_pages=total_pages(response.total, page_size),
                total_results=response.total,
                limit=page_size,
            ),
        )

    async def get_building(self, slug: str) -> Building:
        return await self.catalog.get_building(slug)

    async def get_architect(self, slug: str) -> Architect:
        return await self.catalog.get_architect(slug)

    async def aclose(self) -> None:
        await self.store.aclose()
