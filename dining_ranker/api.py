"""FastAPI service exposing ranking plus cache and metrics introspection."""
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import RankerSettings
from .errors import PreferenceValidationError
from .main import LOG_FORMAT
from .pipeline import DiningRanker
from .schemas import Location, PlaceRecord
from .store import HttpAttributeStore, InMemoryAttributeStore
from .validation import parse_preferences

load_dotenv()

logger = logging.getLogger(__name__)

# Global ranker instance
ranker: Optional[DiningRanker] = None


def build_ranker(settings: RankerSettings) -> DiningRanker:
    if settings.attribute_store_url:
        store = HttpAttributeStore(settings.attribute_store_url, timeout=settings.attribute_store_timeout)
    else:
        store = InMemoryAttributeStore()
    return DiningRanker(store=store, settings=settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the ranker on startup and flush pending writes on shutdown."""
    global ranker
    settings = RankerSettings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO), format=LOG_FORMAT)
    logger.info(f"Starting dining ranker: {settings.log_summary()}")
    ranker = build_ranker(settings)
    yield
    await ranker.aclose()
    ranker = None


app = FastAPI(
    title="Dining Ranker API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RankRequest(BaseModel):
    candidates: list[PlaceRecord]
    preferences: dict[str, Any] = Field(default_factory=dict)
    user_location: Optional[Location] = None
    limit: Optional[int] = Field(default=None, ge=1)
    strict: bool = False


def _require_ranker() -> DiningRanker:
    if not ranker:
        raise HTTPException(status_code=503, detail="Ranking service not initialized")
    return ranker


@app.post("/api/rank")
async def rank(request: RankRequest):
    """Rank candidates against the given preferences."""
    service = _require_ranker()

    try:
        preferences = parse_preferences(request.preferences, strict=request.strict)
    except PreferenceValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)

    result = await service.rank(request.candidates, preferences, request.user_location)
    if request.limit:
        result = result.model_copy(update={"ranked": result.ranked[:request.limit]})
    return result.model_dump(mode="json")


@app.get("/api/stats/cache")
async def cache_stats():
    service = _require_ranker()
    return {
        "caches": {name: stats.model_dump() for name, stats in service.get_cache_stats().items()},
        "memory_bytes": service.cache.memory_usage_estimate(),
    }


@app.get("/api/stats/performance")
async def performance_stats():
    return _require_ranker().get_performance_stats().model_dump(mode="json")


@app.post("/api/cache/clear")
async def clear_caches():
    _require_ranker().clear_caches()
    return {"status": "cleared"}


@app.post("/api/metrics/clear")
async def clear_metrics():
    _require_ranker().clear_metrics()
    return {"status": "cleared"}


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service_ready": ranker is not None}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
