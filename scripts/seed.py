"""
seed.py — load the demo restaurant listings into the SQL database.

Usage:
    python scripts/seed.py                                   # data/seed_restaurants.csv
    python scripts/seed.py --csv data/seed_restaurants.csv   # explicit file
    python scripts/seed.py --reset                           # drop + recreate tables first
    python scripts/seed.py --dry-run                         # parse only, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from localgourmet.config import settings
from localgourmet.database import create_tables, drop_tables
from localgourmet.seed import load_seed_rows, seed_storage
from localgourmet.storage import SqlStorage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def run_seed(csv_path: str, reset: bool = False, dry_run: bool = False) -> None:
    rows = load_seed_rows(csv_path)
    logger.info("Parsed %d restaurants from %s", len(rows), csv_path)
    if dry_run:
        for row in rows:
            logger.info("  %s (%s) — %s", row.name, row.genre, row.address)
        return

    storage = SqlStorage.from_url(settings.database_url)
    try:
        if reset:
            logger.info("Dropping existing tables...")
            await drop_tables(storage.engine)
        await create_tables(storage.engine)
        await seed_storage(storage, rows)
    finally:
        await storage.close()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Seed the LocalGourmet database with demo restaurants.")
    parser.add_argument("--csv", default=settings.seed_file, help="Path to the seed CSV")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    asyncio.run(run_seed(csv_path=args.csv, reset=args.reset, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
