"""Pydantic schemas for menu items."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from localgourmet.schemas.common import CamelModel


class MenuItemCreate(CamelModel):
    """
    Body for POST /restaurants/{id}/menu-items, and one entry of the
    `menus` list on POST /restaurants. Price is in the smallest currency unit.
    """

    name: str = Field(..., min_length=1, max_length=100)
    price: int = Field(..., ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_popular: bool = False


class MenuItemUpdate(CamelModel):
    """Partial update; only fields explicitly sent are applied."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_popular: Optional[bool] = None

    @field_validator("name", "price", "is_popular")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class MenuItemRead(CamelModel):
    id: int
    restaurant_id: int
    name: str
    price: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_popular: bool = False


class PopularMenuItem(MenuItemRead):
    """A popular menu item with its parent restaurant's name resolved."""

    restaurant_name: str
