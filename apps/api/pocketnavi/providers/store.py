from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from .predicates import Predicate

Row = dict[str, Any]


class StoreError(Exception):
    """Base class for record store failures."""


class StoreTransportError(StoreError):
    """Raised when the store is unreachable, answers with a non-success status, or returns an undecodable payload."""


class StoreTimeoutError(StoreTransportError):
    """Raised when a single store call exceeds its timeout."""


class StoreConfigError(StoreError):
    """Raised when the configured store backend is missing required settings."""


class RecordNotFound(StoreError):
    """Raised by key lookups when no record matches. Terminal: never triggers fallback."""


@dataclass
class RankedPage:
    """Result of a ranked full-text search. Each row carries a float `rank`."""
    rows: list[Row] = field(default_factory=list)
    total: int = 0


@dataclass
class QueryPage:
    """Result of a filtered query. `total` is None when the store cannot count."""
    rows: list[Row] = field(default_factory=list)
    total: int | None = None


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


class RecordStore(ABC):
    """Queryable store capability the search engine is written against."""

    name: str = "store"

    @property
    @abstractmethod
    def supports_ranked_search(self) -> bool:
        pass

    @abstractmethod
    async def search(self, query_text: str, limit: int, offset: int, *, timeout: float) -> RankedPage:
        """Ranked full-text search over the searchable building fields, rank descending."""

    @abstractmethod
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
        """Filtered record query."""

    async def aclose(self) -> None:
        return None
