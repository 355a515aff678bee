from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

Base = declarative_base()


def normalize_database_url(database_url: str) -> str:
    """Render, Supabase and local: accept postgres:// and postgresql:// and route them to asyncpg."""
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://") and "asyncpg" not in database_url:
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    url = normalize_database_url(database_url)
    # Supabase pooler / Render close idle connections themselves
    use_null_pool = "render.com" in url or "pooler.supabase.com" in url
    return create_async_engine(
        url,
        echo=echo,
        poolclass=NullPool if use_null_pool else None,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
