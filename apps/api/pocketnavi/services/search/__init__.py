"""Building search pipeline and the service facade over it."""

from .search import SearchService
from .search_logic import SearchEngine

__all__ = ["SearchService", "SearchEngine"]
