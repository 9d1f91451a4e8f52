"""
Demo data loader — reads restaurant listings from a CSV with pandas and
inserts them through the storage contract, so both backends seed identically.

CSV columns: name, genre, address, phone, description, image_url, latitude,
longitude, hours, price_range, features ("|"-separated).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from localgourmet.schemas import RestaurantCreate
from localgourmet.storage.base import Storage

logger = logging.getLogger(__name__)

FEATURE_SEPARATOR = "|"


# ── Column parsing helpers ───────────────────────────────────────────────────


def _parse_text(val: object) -> Optional[str]:
    """Blank cells and NaN become None."""
    if pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _parse_float(val: object) -> Optional[float]:
    if pd.isna(val):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _parse_features(val: object) -> list[str]:
    """Split the "|"-separated feature list, dropping blanks."""
    if pd.isna(val) or not str(val).strip():
        return []
    return [f.strip() for f in str(val).split(FEATURE_SEPARATOR) if f.strip()]


# ── Loading ──────────────────────────────────────────────────────────────────


def load_seed_rows(csv_path: Union[str, Path]) -> list[RestaurantCreate]:
    """Parse the seed CSV; rows without a name, genre or address are skipped."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=True)
    rows: list[RestaurantCreate] = []
    for idx, row in df.iterrows():
        name = _parse_text(row.get("name"))
        genre = _parse_text(row.get("genre"))
        address = _parse_text(row.get("address"))
        if not name or not genre or not address:
            logger.warning("Skipping seed row %d: name, genre and address are required", idx)
            continue
        rows.append(
            RestaurantCreate(
                name=name,
                genre=genre,
                address=address,
                phone=_parse_text(row.get("phone")),
                description=_parse_text(row.get("description")),
                image_url=_parse_text(row.get("image_url")),
                latitude=_parse_float(row.get("latitude")),
                longitude=_parse_float(row.get("longitude")),
                hours=_parse_text(row.get("hours")),
                price_range=_parse_text(row.get("price_range")),
                features=_parse_features(row.get("features")),
            )
        )
    return rows


async def seed_storage(storage: Storage, rows: list[RestaurantCreate]) -> tuple[int, int]:
    """
    Insert every row not already present by (name, address).
    Returns (inserted, skipped).
    """
    inserted = skipped = 0
    for data in rows:
        if await storage.find_restaurant(data.name, data.address) is not None:
            skipped += 1
            continue
        await storage.create_restaurant(data)
        inserted += 1
    logger.info("Seeding complete. Inserted: %d, Skipped: %d", inserted, skipped)
    return inserted, skipped
