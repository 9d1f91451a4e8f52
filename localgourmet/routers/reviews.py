"""
Review endpoints — every mutation is gated by the owner token header.

PUT and DELETE answer 404 both when the review does not exist and when it
belongs to another token.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from localgourmet.dependencies import get_engine, get_owner_token, get_resolver
from localgourmet.exceptions import NotFoundOrUnauthorized
from localgourmet.schemas import ReviewCreate, ReviewRead, ReviewUpdate, SuccessResponse
from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.ownership import OwnershipResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/user", response_model=list[ReviewRead])
async def list_my_reviews(
    owner_token: Optional[str] = Depends(get_owner_token),
    engine: AggregationEngine = Depends(get_engine),
) -> list[ReviewRead]:
    """Reviews written by the calling token."""
    return await engine.list_reviews_by_owner(owner_token)


@router.post("", response_model=ReviewRead)
async def create_review(
    body: ReviewCreate,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> ReviewRead:
    """One review per restaurant per token; a second one is rejected with 400."""
    return await resolver.create_review(body, owner_token)


@router.put("/{review_id}", response_model=ReviewRead)
async def update_review(
    review_id: int,
    body: ReviewUpdate,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> ReviewRead:
    return await resolver.update_review(review_id, body, owner_token)


@router.delete("/{review_id}", response_model=SuccessResponse)
async def delete_review(
    review_id: int,
    owner_token: Optional[str] = Depends(get_owner_token),
    resolver: OwnershipResolver = Depends(get_resolver),
) -> SuccessResponse:
    if not await resolver.delete_review(review_id, owner_token):
        raise NotFoundOrUnauthorized("Review not found or unauthorized")
    return SuccessResponse(success=True)
