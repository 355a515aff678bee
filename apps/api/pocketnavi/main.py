import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pocketnavi.core import get_settings, limiter
from pocketnavi.providers import get_record_store
from pocketnavi.routers import ROUTERS
from pocketnavi.services import SearchService

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_record_store(settings)
    app.state.search_service = SearchService(store, settings.search_config())
    logger.info("Search service ready store=%s strategy=%s", store.name, settings.and_strategy)
    try:
        yield
    finally:
        await app.state.search_service.aclose()


app = FastAPI(
    title="PocketNavi API",
    description="Search for architectural works and their architects.",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok", "store": settings.store_backend}
