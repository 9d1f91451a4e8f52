from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from localgourmet.config import Settings
from localgourmet.database import create_tables
from localgourmet.main import create_app
from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.listings import ListingService
from localgourmet.services.ownership import OwnershipResolver
from localgourmet.services.stats_cache import StatsCache
from localgourmet.storage import MemoryStorage, SqlStorage

BACKENDS = ["memory", "sql"]


def _sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'localgourmet-test.db'}"


# ── Storage-level fixtures (run every test against both backends) ───────────


@pytest.fixture(params=BACKENDS)
async def storage(request, tmp_path):
    if request.param == "memory":
        store = MemoryStorage()
    else:
        store = SqlStorage.from_url(_sqlite_url(tmp_path))
        await create_tables(store.engine)
    yield store
    await store.close()


@pytest.fixture
def stats_cache():
    return StatsCache(maxsize=64, ttl=60)


@pytest.fixture
def engine(storage):
    return AggregationEngine(storage)


@pytest.fixture
def resolver(storage):
    return OwnershipResolver(storage)


@pytest.fixture
def listings(storage):
    return ListingService(storage)


# ── HTTP fixtures ────────────────────────────────────────────────────────────


@pytest.fixture(params=BACKENDS)
def app_settings(request, tmp_path) -> Settings:
    return Settings(
        storage_backend=request.param,
        database_url=_sqlite_url(tmp_path),
        seed_on_startup=False,
        stats_cache_enabled=True,
    )


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as c:
        yield c
