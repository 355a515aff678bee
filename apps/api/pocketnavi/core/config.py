from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"

StoreBackend = Literal["postgres", "rest"]
AndStrategyName = Literal["windowed", "fanout"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"

    # Record store: "postgres" (ranked full-text) or "rest" (PostgREST / Supabase data API)
    store_backend: StoreBackend = "postgres"
    database_url: str = "postgresql://localhost/pocketnavi"
    sql_echo: bool = False
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Search
    page_size: int = 10
    and_strategy: AndStrategyName = "windowed"
    and_candidate_window: int = 50
    fallback_window: int = 50
    fulltext_empty_fallthrough: bool = True
    max_concurrency: int = 6

    # Timeouts (seconds); fallback calls are many, so each gets a shorter budget
    store_timeout_seconds: float = 30.0
    fallback_timeout_seconds: float = 5.0
    relation_timeout_seconds: float = 10.0
    search_budget_seconds: float = 20.0

    search_rate_limit: str = "30/minute"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def rest_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def search_config(self) -> "SearchConfig":
        return SearchConfig(
            page_size=max(1, self.page_size),
            and_strategy=self.and_strategy,
            and_candidate_window=max(1, self.and_candidate_window),
            fallback_window=max(1, self.fallback_window),
            fulltext_empty_fallthrough=self.fulltext_empty_fallthrough,
            max_concurrency=max(1, self.max_concurrency),
            store_timeout_seconds=self.store_timeout_seconds,
            fallback_timeout_seconds=self.fallback_timeout_seconds,
            relation_timeout_seconds=self.relation_timeout_seconds,
            search_budget_seconds=self.search_budget_seconds,
        )


@dataclass(frozen=True)
class SearchConfig:
    """Immutable subset of Settings injected into the search engine."""
    page_size: int = 10
    and_strategy: AndStrategyName = "windowed"
    and_candidate_window: int = 50
    fallback_window: int = 50
    fulltext_empty_fallthrough: bool = True
    max_concurrency: int = 6
    store_timeout_seconds: float = 30.0
    fallback_timeout_seconds: float = 5.0
    relation_timeout_seconds: float = 10.0
    search_budget_seconds: float = 20.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
