"""
FastAPI dependencies — per-request access to the services built in the lifespan,
and owner-token extraction from the configured request header.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from localgourmet.services.aggregation import AggregationEngine
from localgourmet.services.listings import ListingService
from localgourmet.services.ownership import OwnershipResolver
from localgourmet.storage.base import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_engine(request: Request) -> AggregationEngine:
    return request.app.state.aggregation


def get_resolver(request: Request) -> OwnershipResolver:
    return request.app.state.ownership


def get_listings(request: Request) -> ListingService:
    return request.app.state.listings


def get_owner_token(request: Request) -> Optional[str]:
    """
    The caller's owner token, or None. Validation is left to the ownership
    layer so a missing token fails the same way from every entry point.
    """
    return request.headers.get(request.app.state.settings.owner_token_header)


def require_listing_token(owner_token: Optional[str] = Depends(get_owner_token)) -> str:
    """
    Listing creation is not owner-gated; it only requires that some token
    is present (existence, not ownership).
    """
    if not owner_token or not owner_token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return owner_token
