"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from localgourmet import __version__
from localgourmet.dependencies import get_storage
from localgourmet.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(storage: Storage = Depends(get_storage)) -> JSONResponse:
    """
    Readiness probe — checks that the storage backend answers.
    Returns 200 with {"storage": "ok", "backend": ...} when ready, else 503.
    """
    ok = await storage.ping()
    if not ok:
        logger.warning("Readiness check failed: %s storage unreachable", storage.name)
    return JSONResponse(
        content={"storage": "ok" if ok else "error", "backend": storage.name},
        status_code=200 if ok else 503,
    )
