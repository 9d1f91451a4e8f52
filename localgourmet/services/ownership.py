"""
Ownership resolver — the only access-control primitive in LocalGourmet.

Reviews and bookmarks belong to the anonymous owner token that created them.
The token is an opaque, client-minted string compared by equality; it is a
convenience identity, not a security boundary.

Rules:
  1. Every review/bookmark mutation needs a non-empty token. A missing one
     raises MissingIdentity before any storage access.
  2. A review can only be changed by the token stored on it. "Does not exist"
     and "belongs to someone else" are the same failure to the caller.
  3. One review per (restaurant, token); a second one is a Conflict.
  4. Bookmarks are idempotent: creating an existing pair returns it, deleting
     removes every matching row.
"""

from __future__ import annotations

import logging
from typing import Optional

from localgourmet.exceptions import (
    Conflict,
    MissingIdentity,
    NotFoundOrUnauthorized,
    ValidationError,
)
from localgourmet.schemas import BookmarkRead, ReviewCreate, ReviewRead, ReviewUpdate
from localgourmet.services.stats_cache import StatsCache
from localgourmet.storage.base import Storage

logger = logging.getLogger(__name__)


def require_owner_token(owner_token: Optional[str]) -> str:
    """Return the token unchanged, or raise MissingIdentity if it is absent or blank."""
    if owner_token is None or not owner_token.strip():
        raise MissingIdentity()
    return owner_token


class OwnershipResolver:
    """Gates every review and bookmark mutation by owner token."""

    def __init__(self, storage: Storage, stats_cache: Optional[StatsCache] = None):
        self.storage = storage
        self.stats_cache = stats_cache

    def _invalidate(self, restaurant_id: int) -> None:
        if self.stats_cache is not None:
            self.stats_cache.invalidate(restaurant_id)

    async def _owned_review(self, review_id: int, owner_token: str) -> ReviewRead:
        review = await self.storage.get_review(review_id)
        if review is None or review.owner_token != owner_token:
            logger.info("Rejected access to review %d (missing or not owned)", review_id)
            raise NotFoundOrUnauthorized("Review not found or unauthorized")
        return review

    # ── Reviews ──────────────────────────────────────────────────────────────

    async def create_review(self, data: ReviewCreate, owner_token: Optional[str]) -> ReviewRead:
        token = require_owner_token(owner_token)

        if await self.storage.get_restaurant(data.restaurant_id) is None:
            raise ValidationError("Restaurant does not exist")

        existing = await self.storage.list_reviews(
            restaurant_ids=[data.restaurant_id], owner_token=token
        )
        if existing:
            raise Conflict("You have already reviewed this restaurant")

        review = await self.storage.create_review(data, token)
        self._invalidate(review.restaurant_id)
        logger.info("Created review %d for restaurant %d", review.id, review.restaurant_id)
        return review

    async def update_review(
        self, review_id: int, patch: ReviewUpdate, owner_token: Optional[str]
    ) -> ReviewRead:
        token = require_owner_token(owner_token)
        await self._owned_review(review_id, token)

        updated = await self.storage.update_review(review_id, patch)
        if updated is None:
            # Deleted between the ownership check and the write.
            raise NotFoundOrUnauthorized("Review not found or unauthorized")
        self._invalidate(updated.restaurant_id)
        logger.info("Updated review %d", review_id)
        return updated

    async def delete_review(self, review_id: int, owner_token: Optional[str]) -> bool:
        """Return False (never raise) when the review is missing or not owned."""
        token = require_owner_token(owner_token)
        try:
            review = await self._owned_review(review_id, token)
        except NotFoundOrUnauthorized:
            return False

        deleted = await self.storage.delete_review(review_id)
        if deleted:
            self._invalidate(review.restaurant_id)
            logger.info("Deleted review %d", review_id)
        return deleted

    # ── Bookmarks ────────────────────────────────────────────────────────────

    async def create_bookmark(
        self, restaurant_id: int, owner_token: Optional[str]
    ) -> BookmarkRead:
        token = require_owner_token(owner_token)

        if await self.storage.get_restaurant(restaurant_id) is None:
            raise ValidationError("Restaurant does not exist")

        existing = await self.storage.find_bookmark(restaurant_id, token)
        if existing is not None:
            return existing
        return await self.storage.create_bookmark(restaurant_id, token)

    async def delete_bookmark(self, restaurant_id: int, owner_token: Optional[str]) -> bool:
        token = require_owner_token(owner_token)
        removed = await self.storage.delete_bookmarks(restaurant_id, token)
        if removed > 1:
            logger.info(
                "Removed %d duplicate bookmarks for restaurant %d", removed, restaurant_id
            )
        return removed > 0

    async def is_bookmarked(self, restaurant_id: int, owner_token: Optional[str]) -> bool:
        token = require_owner_token(owner_token)
        return await self.storage.find_bookmark(restaurant_id, token) is not None
