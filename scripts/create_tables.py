"""
create_tables.py — idempotent table creation script.
Run this before starting with STORAGE_BACKEND=sql for the first time, or after
schema changes. Safe to run multiple times (all DDL uses IF NOT EXISTS).

Usage:
    python scripts/create_tables.py
"""

from __future__ import annotations

import asyncio

from localgourmet.config import settings
from localgourmet.database import build_engine, create_tables


async def main() -> None:
    """Create all tables."""
    engine = build_engine(settings.database_url)
    print("Creating tables...")
    await create_tables(engine)
    print("  ✓ All tables created (IF NOT EXISTS)")

    print("\nDone. Run `python scripts/seed.py` next.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
