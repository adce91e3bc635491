"""
MoodyFlicks - FastAPI Application
"Pick a mood, find a movie, earn some points."
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from moodyflicks.config import get_settings
from moodyflicks.database import init_db, get_db
from moodyflicks.dependencies import get_catalog
from moodyflicks.models import StateSlot  # noqa: F401
from moodyflicks.routers import progress, collections, moods, quiz, trivia, daily, movies
from moodyflicks.schemas import HealthCheck
from moodyflicks.services.tmdb import CatalogError, TMDBService

settings = get_settings()

# ─── Logging ──────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables. Shutdown: cleanup."""
    logger.info("🎬 MoodyFlicks - Starting up...")
    await init_db()
    logger.info("✅ Database initialized")
    yield
    logger.info("👋 Shutting down...")


# ─── App ──────────────────────────────────────────────────

app = FastAPI(
    title="MoodyFlicks API",
    description="Mood-based movie picks with points, streaks, quizzes and collections.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    openapi_url="/openapi.json" if settings.ENVIRONMENT == "development" else None,
)


# ─── Global Error Handler ─────────────────────────────────
# Never leak tracebacks or table names to clients.

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ──────────────────────────────────────────────

app.include_router(progress.router, prefix="/api/progress", tags=["progress"])
app.include_router(collections.router, prefix="/api/collections", tags=["collections"])
app.include_router(moods.router, prefix="/api/moods", tags=["moods"])
app.include_router(quiz.router, prefix="/api/quiz", tags=["quiz"])
app.include_router(trivia.router, prefix="/api/trivia", tags=["trivia"])
app.include_router(daily.router, prefix="/api/daily", tags=["daily"])
app.include_router(movies.router, prefix="/api/movies", tags=["movies"])


# ─── Health Check ─────────────────────────────────────────

@app.get("/health", response_model=HealthCheck)
async def health_check(
    check_services: bool = False,
    db: AsyncSession = Depends(get_db),
    catalog: TMDBService = Depends(get_catalog),
):
    if not check_services:
        return HealthCheck(status="ok")

    health = HealthCheck(status="ok", database="unknown", tmdb="unknown")

    try:
        await db.execute(select(1))
        health.database = "connected"
    except Exception as e:
        logger.error(f"Health DB fail: {e}")
        health.database = "disconnected"
        health.status = "degraded"

    try:
        await catalog.get_movie(550)
        health.tmdb = "connected"
    except CatalogError as e:
        logger.error(f"Health TMDB fail: {e}")
        health.tmdb = "disconnected"
        health.status = "degraded"

    return health
