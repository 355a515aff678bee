from .search import SearchEngine, SearchService
from .catalog import CatalogService

__all__ = ["SearchService", "SearchEngine", "CatalogService"]
