import asyncio

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError

from pocketnavi.core.constants import BUILDINGS_TABLE
from pocketnavi.db.session import Base, normalize_database_url
from pocketnavi.providers.postgres import (
    RANKED_COUNT_SQL,
    RANKED_SEARCH_SQL,
    PostgresRecordStore,
    build_select,
    predicate_to_clause,
)
from pocketnavi.providers.predicates import AllOf, AnyOf, Contains, Equals, In
from pocketnavi.providers.store import OrderBy, StoreError, StoreTimeoutError, StoreTransportError

pytestmark = pytest.mark.anyio

TABLE = Base.metadata.tables[BUILDINGS_TABLE]


def _compile(clause):
    return clause.compile(dialect=postgresql.dialect())


def test_contains_compiles_to_escaped_case_insensitive_like():
    compiled = _compile(predicate_to_clause(TABLE, Contains("title", "50%")))
    sql = str(compiled)
    assert "lower(buildings_table_2.title)" in sql
    assert "LIKE" in sql
    assert "ESCAPE '/'" in sql
    assert "50/%" in compiled.params.values()


def test_empty_in_and_anyof_match_nothing():
    assert str(_compile(predicate_to_clause(TABLE, In("building_id", ())))).lower() == "false"
    assert str(_compile(predicate_to_clause(TABLE, AnyOf(())))).lower() == "false"
    assert str(_compile(predicate_to_clause(TABLE, AllOf(())))).lower() == "true"


def test_combinators_compile():
    clause = predicate_to_clause(
        TABLE,
        AllOf((Equals("slug", "a"), AnyOf((Contains("title", "x"), Contains("titleEn", "y"))))),
    )
    sql = str(_compile(clause))
    assert " AND " in sql and " OR " in sql


def test_build_select_orders_and_pages():
    stmt, count_stmt = build_select(
        TABLE,
        In("building_id", (1, 2)),
        ("building_id", "slug"),
        limit=10,
        offset=20,
        order_by=(OrderBy("completionYears", descending=True),),
    )
    sql = str(_compile(stmt))
    assert 'ORDER BY buildings_table_2."completionYears" DESC' in sql
    assert "LIMIT" in sql and "OFFSET" in sql
    assert "count(*)" in str(_compile(count_stmt))


def test_ranked_sql_uses_websearch_and_normalized_rank():
    sql = RANKED_SEARCH_SQL.text
    assert "websearch_to_tsquery('simple', :q)" in sql
    assert ", 32) AS rank" in sql
    assert '"locationEn_from_datasheetChunkEn"' in sql


def test_ranked_document_includes_credited_architect_names():
    for statement in (RANKED_SEARCH_SQL, RANKED_COUNT_SQL):
        sql = statement.text
        assert "LEFT JOIN LATERAL" in sql
        assert "string_agg" in sql
        assert "individual_architects" in sql
        assert "COALESCE(an.names, '')" in sql


def test_normalize_database_url():
    assert normalize_database_url("postgres://u@h/db") == "postgresql+asyncpg://u@h/db"
    assert normalize_database_url("postgresql://u@h/db") == "postgresql+asyncpg://u@h/db"
    assert normalize_database_url("postgresql+asyncpg://u@h/db") == "postgresql+asyncpg://u@h/db"


class _Result:
    def __init__(self, rows=None, scalar=None):
        self._rows = rows or []
        self._scalar = scalar

    def mappings(self):
        return self

    def all(self):
        return self._rows

    def scalar(self):
        return self._scalar


class _Session:
    def __init__(self, results=(), delay=0.0, error=None):
        self.results = list(results)
        self.delay = delay
        self.error = error
        self.executed = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, *args, **kwargs):
        self.executed += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.results.pop(0)


async def test_search_casts_rank_and_counts():
    session = _Session([_Result([{"building_id": 1, "rank": "0.25"}]), _Result(scalar=7)])
    store = PostgresRecordStore(lambda: session)
    page = await store.search("church", 10, 0, timeout=1.0)
    assert page.rows == [{"building_id": 1, "rank": 0.25}]
    assert page.total == 7


async def test_search_blank_text_skips_database():
    session = _Session()
    store = PostgresRecordStore(lambda: session)
    page = await store.search("   ", 10, 0, timeout=1.0)
    assert page.rows == [] and page.total == 0
    assert session.executed == 0


async def test_query_counts_only_when_page_is_full():
    short = _Session([_Result([{"building_id": 1}])])
    page = await PostgresRecordStore(lambda: short).query(
        BUILDINGS_TABLE, None, ("building_id",), limit=10, offset=0, timeout=1.0
    )
    assert page.total == 1 and short.executed == 1

    full = _Session([_Result([{"building_id": 1}, {"building_id": 2}]), _Result(scalar=5)])
    page = await PostgresRecordStore(lambda: full).query(
        BUILDINGS_TABLE, None, ("building_id",), limit=2, offset=0, timeout=1.0
    )
    assert page.total == 5 and full.executed == 2


async def test_timeout_maps_to_store_timeout():
    store = PostgresRecordStore(lambda: _Session(delay=1.0))
    with pytest.raises(StoreTimeoutError):
        await store.search("church", 10, 0, timeout=0.01)


async def test_driver_error_maps_to_transport_error():
    store = PostgresRecordStore(lambda: _Session(error=SQLAlchemyError("connection refused")))
    with pytest.raises(StoreTransportError):
        await store.query(BUILDINGS_TABLE, None, ("building_id",), timeout=1.0)


async def test_unknown_table_is_a_store_error():
    store = PostgresRecordStore(lambda: _Session())
    with pytest.raises(StoreError):
        await store.query("no_such_table", None, ("id",), timeout=1.0)
