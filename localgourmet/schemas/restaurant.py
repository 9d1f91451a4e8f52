"""Pydantic schemas for restaurants and their derived (stats-bearing) views."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from localgourmet.schemas.common import CamelModel
from localgourmet.schemas.menu_item import MenuItemCreate, MenuItemRead
from localgourmet.schemas.review import ReviewRead


class RestaurantCreate(CamelModel):
    """Fields of a new restaurant listing."""

    name: str = Field(..., min_length=1, max_length=200)
    genre: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1)
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    hours: Optional[str] = None
    price_range: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    is_open: bool = True

    @field_validator("features", mode="before")
    @classmethod
    def _none_features(cls, v):
        return [] if v is None else v


class ListingCreate(RestaurantCreate):
    """
    Body for POST /restaurants — a restaurant plus its initial menu.
    Created atomically: either everything persists or nothing does.
    """

    menus: list[MenuItemCreate] = Field(default_factory=list)


class RestaurantUpdate(CamelModel):
    """Partial update; only fields explicitly sent are applied."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    genre: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    hours: Optional[str] = None
    price_range: Optional[str] = None
    features: Optional[list[str]] = None
    is_open: Optional[bool] = None

    @field_validator("name", "genre", "address", "features", "is_open")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class RestaurantRead(CamelModel):
    """A stored restaurant, as persisted."""

    id: int
    name: str
    genre: str
    address: str
    phone: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    hours: Optional[str] = None
    price_range: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    is_open: bool = True
    created_at: datetime

    @field_validator("features", mode="before")
    @classmethod
    def _none_features(cls, v):
        return [] if v is None else v


class RestaurantWithStats(RestaurantRead):
    """
    Restaurant + rating statistics computed from its reviews at read time.
    is_bookmarked is only set in a bookmark listing.
    """

    average_rating: float = 0.0
    review_count: int = 0
    is_bookmarked: Optional[bool] = None


class RestaurantWithDetails(RestaurantWithStats):
    """Restaurant + stats + every review and menu item it owns."""

    reviews: list[ReviewRead] = Field(default_factory=list)
    menu_items: list[MenuItemRead] = Field(default_factory=list)
