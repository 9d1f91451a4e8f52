"""Bookmark endpoints — personal to the owner token in the request header."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from localgourmet.dependencies import get_engine, get_owner_token, get_resolver
from localgourmet.schemas import (
    BookmarkCreate,
    BookmarkRead,
    BookmarkStatus,
    RestaurantWithStats,
    SuccessResponse,
)
from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.ownership import OwnershipResolver

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("", response_model=list[RestaurantWithStats])
async def list_bookmarks(
    owner_token: Optional[str] = Depends(get_owner_token),
    engine: AggregationEngine = Depends(get_engine),
) -> list[RestaurantWithStats]:
    """Bookmarked restaurants with stats; every row has isBookmarked=true."""
    return await engine.get_bookmarked_restaurants(owner_token)


@router.post("", response_model=BookmarkRead)
async def create_bookmark(
    body: BookmarkCreate,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> BookmarkRead:
    """Idempotent: bookmarking twice returns the existing bookmark."""
    return await resolver.create_bookmark(body.restaurant_id, owner_token)


@router.delete("/{restaurant_id}", response_model=SuccessResponse)
async def delete_bookmark(
    restaurant_id: int,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> SuccessResponse:
    """success=false when there was nothing to delete — never 404."""
    return SuccessResponse(success=await resolver.delete_bookmark(restaurant_id, owner_token))


@router.get("/{restaurant_id}/check", response_model=BookmarkStatus)
async def check_bookmark(
    restaurant_id: int,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> BookmarkStatus:
    return BookmarkStatus(is_bookmarked=await resolver.is_bookmarked(restaurant_id, owner_token))
