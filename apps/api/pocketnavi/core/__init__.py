"""Core configuration, constants, and shared infrastructure."""

from pocketnavi.core.config import SearchConfig, Settings, get_settings
from pocketnavi.core.constants import SEARCHABLE_FIELDS, UNRANKED_RELEVANCE
from pocketnavi.core.limiter import limiter

__all__ = [
    "Settings",
    "SearchConfig",
    "get_settings",
    "SEARCHABLE_FIELDS",
    "UNRANKED_RELEVANCE",
    "limiter",
]
