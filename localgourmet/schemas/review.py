"""Pydantic schemas for reviews."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from localgourmet.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    """Body for POST /reviews. The owner token comes from the request header."""

    restaurant_id: int
    nickname: str = Field(..., min_length=1, max_length=50)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(CamelModel):
    """
    Body for PUT /reviews/{id}. Only these fields are patchable;
    restaurant and owner cannot be reassigned.
    """

    model_config = ConfigDict(extra="forbid")

    nickname: Optional[str] = Field(None, min_length=1, max_length=50)
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator("nickname", "rating")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class ReviewRead(CamelModel):
    """A stored review. The owner token is kept for ownership checks but never serialised."""

    id: int
    restaurant_id: int
    # kept for ownership checks, never serialized
    owner_token: Optional[str] = Field(None, exclude=True)
    nickname: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime
