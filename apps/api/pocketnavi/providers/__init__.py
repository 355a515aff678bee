from pocketnavi.core.config import Settings, get_settings
from pocketnavi.db.session import create_engine, create_session_factory

from .postgres import PostgresRecordStore
from .predicates import AllOf, AnyOf, Contains, Equals, In, Predicate
from .rest import RestRecordStore
from .store import (
    OrderBy,
    QueryPage,
    RankedPage,
    RecordNotFound,
    RecordStore,
    Row,
    StoreConfigError,
    StoreError,
    StoreTimeoutError,
    StoreTransportError,
)


def get_record_store(settings: Settings | None = None) -> RecordStore:
    """Build the configured record store. The caller owns it and must `aclose()` it."""
    s = settings or get_settings()
    if s.store_backend == "rest":
        if not s.rest_configured:
            raise StoreConfigError(
                "Data API not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        return RestRecordStore(base_url=s.supabase_url, api_key=s.supabase_anon_key)
    if s.store_backend == "postgres":
        if not s.database_url:
            raise StoreConfigError("Database not configured. Set DATABASE_URL.")
        engine = create_engine(s.database_url, echo=s.sql_echo)
        return PostgresRecordStore(create_session_factory(engine), engine=engine)
    raise StoreConfigError(f"Unknown store backend: {s.store_backend}")


__all__ = [
    "AllOf",
    "AnyOf",
    "Contains",
    "Equals",
    "In",
    "Predicate",
    "OrderBy",
    "QueryPage",
    "RankedPage",
    "RecordNotFound",
    "RecordStore",
    "Row",
    "StoreConfigError",
    "StoreError",
    "StoreTimeoutError",
    "StoreTransportError",
    "PostgresRecordStore",
    "RestRecordStore",
    "get_record_store",
]
