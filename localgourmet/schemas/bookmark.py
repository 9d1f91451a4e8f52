"""Pydantic schemas for bookmarks."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from localgourmet.schemas.common import CamelModel


class BookmarkCreate(CamelModel):
    """Body for POST /bookmarks."""

    restaurant_id: int


class BookmarkRead(CamelModel):
    id: int
    restaurant_id: int
    # kept for ownership checks, never serialized
    owner_token: Optional[str] = Field(None, exclude=True)
    created_at: datetime
