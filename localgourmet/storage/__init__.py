"""Storage backends behind one contract."""

from __future__ import annotations

import logging

from localgourmet.config import Settings
from localgourmet.database import create_tables
from localgourmet.storage.base import Storage
from localgourmet.storage.memory import MemoryStorage
from localgourmet.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


async def build_storage(settings: Settings) -> Storage:
    """
    Construct the backend selected by STORAGE_BACKEND.
    The SQL backend gets its tables created (idempotent) before first use.
    """
    if settings.storage_backend == "sql":
        storage = SqlStorage.from_url(
            settings.database_url,
            echo=(settings.app_env == "development" and settings.log_level.upper() == "DEBUG"),
        )
        await create_tables(storage.engine)
        logger.info("Using SQL storage backend.")
        return storage

    logger.info("Using in-memory storage backend.")
    return MemoryStorage()


__all__ = ["Storage", "MemoryStorage", "SqlStorage", "build_storage"]
