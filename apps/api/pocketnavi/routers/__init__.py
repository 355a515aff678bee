from .search import router as search_router
from .catalog import router as catalog_router

ROUTERS = (search_router, catalog_router)

__all__ = ["ROUTERS", "search_router", "catalog_router"]
