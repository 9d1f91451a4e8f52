"""
Aggregation engine — derived restaurant views computed fresh on every read.

Pipeline for a restaurant listing:
  1. Fetch restaurants from storage (exact genre filter)
  2. Apply the free-text search in Python (name OR description OR genre)
  3. Fetch all reviews of the survivors in one call
  4. compute_stats() per restaurant (served from StatsCache when enabled)

Statistics are never read from the backend, so the memory and SQL stores
produce identical numbers by construction.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Optional

from localgourmet.exceptions import NotFound
from localgourmet.schemas import (
    MenuItemRead,
    PopularMenuItem,
    RestaurantRead,
    RestaurantWithDetails,
    RestaurantWithStats,
    ReviewRead,
)
from localgourmet.services.ownership import require_owner_token
from localgourmet.services.stats_cache import RatingStats, StatsCache, compute_stats
from localgourmet.storage.base import Storage

logger = logging.getLogger(__name__)

UNKNOWN_RESTAURANT = "Unknown Restaurant"

# Genre values the client sends to mean "no genre filter"
_ANY_GENRE = {"", "all"}


def normalise_genre(genre: Optional[str]) -> Optional[str]:
    if genre is None or genre in _ANY_GENRE:
        return None
    return genre


def matches_search(restaurant: RestaurantRead, term: str) -> bool:
    """Case-insensitive substring match against name OR description OR genre."""
    needle = term.casefold()
    fields = (restaurant.name, restaurant.description, restaurant.genre)
    return any(f is not None and needle in f.casefold() for f in fields)


def with_stats(
    restaurant: RestaurantRead,
    stats: RatingStats,
    is_bookmarked: Optional[bool] = None,
) -> RestaurantWithStats:
    return RestaurantWithStats(
        **restaurant.model_dump(),
        average_rating=stats.average_rating,
        review_count=stats.review_count,
        is_bookmarked=is_bookmarked,
    )


class AggregationEngine:
    """Builds RestaurantWithStats / RestaurantWithDetails / PopularMenuItem views."""

    def __init__(self, storage: Storage, stats_cache: Optional[StatsCache] = None):
        self.storage = storage
        self.stats_cache = stats_cache

    async def stats_for(self, restaurant_ids: Iterable[int]) -> dict[int, RatingStats]:
        """RatingStats for every id, reading reviews only for cache misses."""
        ids = list(dict.fromkeys(restaurant_ids))
        result: dict[int, RatingStats] = {}
        missing: list[int] = []
        for rid in ids:
            cached = self.stats_cache.get(rid) if self.stats_cache is not None else None
            if cached is None:
                missing.append(rid)
            else:
                result[rid] = cached

        if missing:
            versions = self._versions(missing)
            ratings: dict[int, list[int]] = defaultdict(list)
            for review in await self.storage.list_reviews(restaurant_ids=missing):
                ratings[review.restaurant_id].append(review.rating)
            for rid in missing:
                stats = compute_stats(ratings.get(rid, ()))
                result[rid] = stats
                if self.stats_cache is not None:
                    self.stats_cache.set(rid, stats, version=versions[rid])
        return result

    def _versions(self, restaurant_ids: Iterable[int]) -> dict[int, Optional[tuple[int, int]]]:
        # Taken before reviews are read, so a write landing mid-read is detected.
        if self.stats_cache is None:
            return {rid: None for rid in restaurant_ids}
        return {rid: self.stats_cache.version(rid) for rid in restaurant_ids}

    # ── Listings ─────────────────────────────────────────────────────────────

    async def list_restaurants(
        self,
        genre: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[RestaurantWithStats]:
        """
        Restaurants matching the genre (exact, case-sensitive) AND the search
        term, in store insertion order, each with its rating stats.
        """
        restaurants = await self.storage.list_restaurants(genre=normalise_genre(genre))

        term = search.strip() if search else ""
        if term:
            restaurants = [r for r in restaurants if matches_search(r, term)]

        stats = await self.stats_for(r.id for r in restaurants)
        return [with_stats(r, stats[r.id]) for r in restaurants]

    async def get_restaurant_detail(self, restaurant_id: int) -> RestaurantWithDetails:
        restaurant = await self.storage.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFound("Restaurant not found")

        version = self._versions([restaurant_id])[restaurant_id]
        reviews = await self.storage.list_reviews(restaurant_ids=[restaurant_id])
        menu_items = await self.storage.list_menu_items(restaurant_id=restaurant_id)

        # Full review set is at hand, so recompute rather than trusting the cache.
        stats = compute_stats(r.rating for r in reviews)
        if self.stats_cache is not None:
            self.stats_cache.set(restaurant_id, stats, version=version)

        return RestaurantWithDetails(
            **restaurant.model_dump(),
            average_rating=stats.average_rating,
            review_count=stats.review_count,
            reviews=reviews,
            menu_items=menu_items,
        )

    async def get_popular_menu_items(self) -> list[PopularMenuItem]:
        """Popular items with their restaurant's name; dangling parents get a fallback label."""
        items = await self.storage.list_menu_items(popular=True)
        parents = await self.storage.get_restaurants({i.restaurant_id for i in items})
        names = {r.id: r.name for r in parents}

        dangling = [i.id for i in items if i.restaurant_id not in names]
        if dangling:
            logger.warning("Popular menu items with missing restaurant: %s", dangling)

        return [
            PopularMenuItem(
                **item.model_dump(),
                restaurant_name=names.get(item.restaurant_id, UNKNOWN_RESTAURANT),
            )
            for item in items
        ]

    async def get_bookmarked_restaurants(
        self, owner_token: Optional[str]
    ) -> list[RestaurantWithStats]:
        """
        Restaurants bookmarked by the token, ordered by first bookmark.
        Duplicate bookmark rows collapse to one entry; bookmarks pointing at
        deleted restaurants are skipped.
        """
        token = require_owner_token(owner_token)
        bookmarks = await self.storage.list_bookmarks(token)
        ordered_ids = list(dict.fromkeys(b.restaurant_id for b in bookmarks))
        if not ordered_ids:
            return []

        restaurants = {r.id: r for r in await self.storage.get_restaurants(ordered_ids)}
        present = [rid for rid in ordered_ids if rid in restaurants]
        if len(present) < len(ordered_ids):
            logger.info(
                "Skipping %d bookmarks with missing restaurants",
                len(ordered_ids) - len(present),
            )

        stats = await self.stats_for(present)
        return [
            with_stats(restaurants[rid], stats[rid], is_bookmarked=True)
            for rid in present
        ]

    # ── Plain reads ──────────────────────────────────────────────────────────

    async def list_menu_items(self, restaurant_id: int) -> list[MenuItemRead]:
        return await self.storage.list_menu_items(restaurant_id=restaurant_id)

    async def list_reviews_by_owner(self, owner_token: Optional[str]) -> list[ReviewRead]:
        token = require_owner_token(owner_token)
        return await self.storage.list_reviews(owner_token=token)
