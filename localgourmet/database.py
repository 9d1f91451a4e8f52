"""Async SQLAlchemy engine, session factory, and Base declaration."""

from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCTimestamp(TypeDecorator):
    """
    TIMESTAMP WITH TIME ZONE that always reads back as an aware UTC datetime.
    SQLite drops the offset on storage; values are UTC on the way in, so the
    missing tzinfo is restored as UTC on the way out.
    """

    impl = TIMESTAMP
    cache_ok = True

    def __init__(self):
        super().__init__(timezone=True)

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for `database_url`.
    SQLite (aiosqlite) does not take pool sizing arguments.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables (idempotent — IF NOT EXISTS)."""
    from localgourmet.models import Base as _Base  # noqa: F401 — triggers model registration

    async with engine.begin() as conn:
        await conn.run_sync(_Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    from localgourmet.models import Base as _Base  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(_Base.metadata.drop_all)


async def check_db_connectivity(
    session_factory: async_sessionmaker[AsyncSession],
) -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
