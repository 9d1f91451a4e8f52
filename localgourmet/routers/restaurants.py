"""
Restaurant endpoints — listing/search with rating stats, detail view, and the
crowd-sourced "add listing" flow.

Listing creation needs an owner token header to be present (401 otherwise)
but is not owned by it.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from localgourmet.dependencies import get_engine, get_listings, require_listing_token
from localgourmet.schemas import (
    ListingCreate,
    MenuItemCreate,
    MenuItemRead,
    RestaurantRead,
    RestaurantWithDetails,
    RestaurantWithStats,
)
from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.listings import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=list[RestaurantWithStats])
async def list_restaurants(
    genre: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    engine: AggregationEngine = Depends(get_engine),
) -> list[RestaurantWithStats]:
    """
    All restaurants with averageRating and reviewCount.
    - genre: exact match ("all" means no filter)
    - search: case-insensitive substring of name, description or genre
    """
    return await engine.list_restaurants(genre=genre, search=search)


@router.get("/{restaurant_id}", response_model=RestaurantWithDetails)
async def get_restaurant(
    restaurant_id: int,
    engine: AggregationEngine = Depends(get_engine),
) -> RestaurantWithDetails:
    """Restaurant with stats, every review and every menu item. 404 if absent."""
    return await engine.get_restaurant_detail(restaurant_id)


@router.get("/{restaurant_id}/menu-items", response_model=list[MenuItemRead])
async def list_menu_items(
    restaurant_id: int,
    engine: AggregationEngine = Depends(get_engine),
) -> list[MenuItemRead]:
    return await engine.list_menu_items(restaurant_id)


@router.post("", response_model=RestaurantRead, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    body: ListingCreate,
    _: str = Depends(require_listing_token),
    listings: ListingService = Depends(get_listings),
) -> RestaurantRead:
    """
    Create a restaurant together with its optional initial `menus`.
    All-or-nothing: a duplicate menu name leaves no restaurant behind.
    """
    return await listings.create_restaurant(body, body.menus)


@router.post(
    "/{restaurant_id}/menu-items",
    response_model=MenuItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_menu_item(
    restaurant_id: int,
    body: MenuItemCreate,
    _: str = Depends(require_listing_token),
    listings: ListingService = Depends(get_listings),
) -> MenuItemRead:
    return await listings.create_menu_item(restaurant_id, body)
