"""
LocalGourmet — FastAPI application entry point.
Lifespan: build storage backend → verify connectivity → wire services → optional seed.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from localgourmet import __version__
from localgourmet.config import Settings, get_settings
from localgourmet.exceptions import LocalGourmetError
from localgourmet.routers import bookmarks, health, menu_items, restaurants, reviews
from localgourmet.seed import load_seed_rows, seed_storage
from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.listings import ListingService
from localgourmet.services.ownership import OwnershipResolver
from localgourmet.services.stats_cache import StatsCache
from localgourmet.storage import build_storage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Build the configured storage backend (SQL tables are created if missing).
    2. Verify storage connectivity.
    3. Wire the aggregation, ownership and listing services onto app.state.
    4. Seed demo restaurants into an empty store when SEED_ON_STARTUP is set.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting LocalGourmet (env=%s, storage=%s)",
        settings.app_env, settings.storage_backend,
    )

    # Step 1 + 2: storage
    storage = await build_storage(settings)
    if not await storage.ping():
        logger.error("Storage connectivity check FAILED at startup.")
    else:
        logger.info("Storage connectivity verified.")

    # Step 3: services share one storage handle and one stats cache
    stats_cache: Optional[StatsCache] = None
    if settings.stats_cache_enabled:
        stats_cache = StatsCache(
            maxsize=settings.stats_cache_size, ttl=settings.stats_cache_ttl
        )
    app.state.storage = storage
    app.state.stats_cache = stats_cache
    app.state.aggregation = AggregationEngine(storage, stats_cache)
    app.state.ownership = OwnershipResolver(storage, stats_cache)
    app.state.listings = ListingService(storage)

    # Step 4: demo data
    if settings.seed_on_startup:
        seed_path = Path(settings.seed_file)
        if not seed_path.exists():
            logger.warning("Seed file %s not found; starting empty.", seed_path)
        elif await storage.list_restaurants():
            logger.info("Store already has restaurants; skipping seed.")
        else:
            await seed_storage(storage, load_seed_rows(seed_path))

    yield

    logger.info("Shutting down LocalGourmet.")
    await storage.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="LocalGourmet",
        description="Browse, search, review and bookmark restaurants in one city.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── CORS ─────────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ──────────────────────────────────────────────────────────────

    app.include_router(health.router)
    for module in (restaurants, reviews, bookmarks, menu_items):
        app.include_router(module.router, prefix=settings.api_prefix)

    # ── Exception handlers ───────────────────────────────────────────────────

    @app.exception_handler(LocalGourmetError)
    async def domain_exception_handler(request: Request, exc: LocalGourmetError) -> JSONResponse:
        """Typed core failures → status code + human-readable message."""
        if exc.status_code >= 500:
            logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies, params and path ids are reported as 400."""
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return _error(400, f"Invalid request data ({problems})" if problems else "Invalid request data")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return a machine-readable error for any unhandled exception."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url)
        return _error(500, "Internal server error")

    return app


app = create_app()
