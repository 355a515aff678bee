import asyncio
from typing import Any, Sequence

from sqlalchemy import Table, and_, false, func, or_, select, text, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pocketnavi.core.constants import (
    ARCHITECT_COMPOSITIONS_TABLE,
    BUILDING_ARCHITECTS_TABLE,
    BUILDING_SEARCH_COLUMNS,
    BUILDINGS_TABLE,
    INDIVIDUAL_ARCHITECTS_TABLE,
    SEARCHABLE_FIELDS,
)
from pocketnavi.db import models  # noqa: F401  (registers tables on Base.metadata)
from pocketnavi.db.session import Base

from .predicates import AllOf, AnyOf, Contains, Equals, In, Predicate
from .store import (
    OrderBy,
    QueryPage,
    RankedPage,
    RecordStore,
    StoreError,
    StoreTimeoutError,
    StoreTransportError,
)


def _document_sql(alias: str = "b", names: str = "an.names") -> str:
    """`simple` tsvector over the searchable fields plus the credited architects' names."""
    parts = [f"COALESCE({alias}.\"{f}\", '')" for f in SEARCHABLE_FIELDS]
    parts.append(f"COALESCE({names}, '')")
    document = " || ' ' || ".join(parts)
    return f"to_tsvector('simple', {document})"


_SELECT_COLUMNS = ", ".join(f"b.\"{c}\"" for c in BUILDING_SEARCH_COLUMNS)

# One space-joined string of name_ja/name_en for every individual credited on building b
_ARCHITECT_NAMES_JOIN = f"""
    LEFT JOIN LATERAL (
        SELECT string_agg(COALESCE(ia.name_ja, '') || ' ' || COALESCE(ia.name_en, ''), ' ') AS names
        FROM {BUILDING_ARCHITECTS_TABLE} ba
        JOIN {ARCHITECT_COMPOSITIONS_TABLE} ac ON ac.architect_id = ba.architect_id
        JOIN {INDIVIDUAL_ARCHITECTS_TABLE} ia ON ia.individual_architect_id = ac.individual_architect_id
        WHERE ba.building_id = b.building_id
    ) an ON true"""

# websearch_to_tsquery never raises on user input; ts_rank normalization 32 maps rank to rank/(rank+1) in [0, 1)
RANKED_SEARCH_SQL = text(f"""
    SELECT {_SELECT_COLUMNS},
           ts_rank({_document_sql()}, websearch_to_tsquery('simple', :q), 32) AS rank
    FROM {BUILDINGS_TABLE} b
    {_ARCHITECT_NAMES_JOIN}
    WHERE {_document_sql()} @@ websearch_to_tsquery('simple', :q)
    ORDER BY rank DESC, b.building_id
    LIMIT :lim OFFSET :off
""")

RANKED_COUNT_SQL = text(f"""
    SELECT COUNT(*)
    FROM {BUILDINGS_TABLE} b
    {_ARCHITECT_NAMES_JOIN}
    WHERE {_document_sql()} @@ websearch_to_tsquery('simple', :q)
""")


def predicate_to_clause(table: Table, predicate: Predicate | None):
    """Translate a store-neutral predicate to a SQLAlchemy boolean clause on `table`."""
    if predicate is None:
        return true()
    if isinstance(predicate, Contains):
        # lower(col) LIKE lower(pattern); autoescape keeps % and _ in user input literal
        return table.c[predicate.field].icontains(predicate.value, autoescape=True)
    if isinstance(predicate, Equals):
        return table.c[predicate.field] == predicate.value
    if isinstance(predicate, In):
        if not predicate.values:
            return false()
        return table.c[predicate.field].in_(list(predicate.values))
    if isinstance(predicate, AnyOf):
        if not predicate.predicates:
            return false()
        return or_(*[predicate_to_clause(table, p) for p in predicate.predicates])
    if isinstance(predicate, AllOf):
        if not predicate.predicates:
            return true()
        return and_(*[predicate_to_clause(table, p) for p in predicate.predicates])
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def build_select(
    table: Table,
    predicate: Predicate | None,
    fields: Sequence[str],
    *,
    limit: int | None,
    offset: int,
    order_by: Sequence[OrderBy],
):
    clause = predicate_to_clause(table, predicate)
    stmt = select(*[table.c[f] for f in fields]).where(clause)
    for o in order_by:
        col = table.c[o.field]
        stmt = stmt.order_by(col.desc() if o.descending else col.asc())
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)
    count_stmt = select(func.count()).select_from(table).where(clause)
    return stmt, count_stmt


class PostgresRecordStore(RecordStore):
    """Record store over PostgreSQL via SQLAlchemy async (asyncpg)."""

    name = "postgres"

    def __init__(self, sessions: async_sessionmaker[AsyncSession], engine: AsyncEngine | None = None):
        self._sessions = sessions
        self._engine = engine

    @property
    def supports_ranked_search(self) -> bool:
        return True

    async def search(self, query_text: str, limit: int, offset: int, *, timeout: float) -> RankedPage:
        q = (query_text or "").strip()
        if not q:
            return RankedPage()

        async def _run() -> RankedPage:
            # Same AsyncSession must not be shared across concurrent statements; run sequentially
            async with self._sessions() as db:
                result = await db.execute(RANKED_SEARCH_SQL, {"q": q, "lim": limit, "off": offset})
                rows = [dict(r) for r in result.mappings().all()]
                count_result = await db.execute(RANKED_COUNT_SQL, {"q": q})
                total = int(count_result.scalar() or 0)
            for row in rows:
                row["rank"] = float(row.get("rank") or 0.0)
            return RankedPage(rows=rows, total=total)

        return await self._guarded(_run(), timeout, f"search q={q!r}")

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
        try:
            sa_table = Base.metadata.tables[table]
            stmt, count_stmt = build_select(
                sa_table, predicate, fields, limit=limit, offset=offset, order_by=order_by
            )
        except KeyError as e:
            raise StoreError(f"Unknown table or column for {table}: {e}") from e

        async def _run() -> QueryPage:
            async with self._sessions() as db:
                result = await db.execute(stmt)
                rows = [dict(r) for r in result.mappings().all()]
                total: int | None = len(rows) + offset
                if limit is not None and (len(rows) == limit or (offset and not rows)):
                    count_result = await db.execute(count_stmt)
                    total = int(count_result.scalar() or 0)
            return QueryPage(rows=rows, total=total)

        return await self._guarded(_run(), timeout, f"query {table}")

    async def _guarded(self, coro, timeout: float, what: str) -> Any:
        try:
            return await asyncio.wait_for(coro, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise StoreTimeoutError(f"Postgres {what} timed out after {timeout}s") from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreTransportError(f"Postgres {what} failed: {e}") from e

    async def aclose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
