"""
Rating stats — the single definition of how average_rating and review_count
are derived from raw review ratings, plus an optional per-restaurant cache.

The cache never changes results: every entry is exactly what compute_stats()
returns, and review writes invalidate the affected restaurant.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


class RatingStats(NamedTuple):
    average_rating: float
    review_count: int


def compute_stats(ratings: Iterable[int]) -> RatingStats:
    """
    Mean of the ratings rounded half-up to one decimal (4.25 -> 4.3),
    or 0.0 when there are none. Decimal arithmetic keeps the rounding exact.
    """
    values = list(ratings)
    if not values:
        return RatingStats(0.0, 0)
    mean = Decimal(sum(values)) / Decimal(len(values))
    return RatingStats(float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)), len(values))


class StatsCache:
    """
    TTL cache of RatingStats keyed by restaurant id.

    Readers take a version() token before reading reviews and pass it back to
    set(); a review write that invalidated the id in between makes the token
    stale and the computed stats are not stored.
    """

    def __init__(self, maxsize: int = 1024, ttl: float = 300):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._versions: dict[int, int] = {}
        self._epoch = 0
        self.hits = 0
        self.misses = 0

    def version(self, restaurant_id: int) -> tuple[int, int]:
        return self._epoch, self._versions.get(restaurant_id, 0)

    def get(self, restaurant_id: int) -> Optional[RatingStats]:
        stats = self._cache.get(restaurant_id)
        if stats is None:
            self.misses += 1
        else:
            self.hits += 1
            logger.debug("Stats cache HIT (restaurant=%d)", restaurant_id)
        return stats

    def set(
        self,
        restaurant_id: int,
        stats: RatingStats,
        version: Optional[tuple[int, int]] = None,
    ) -> bool:
        """Store stats unless the id was invalidated since `version` was taken."""
        if version is not None and version != self.version(restaurant_id):
            logger.debug("Stats cache SKIP stale result (restaurant=%d)", restaurant_id)
            return False
        self._cache[restaurant_id] = stats
        return True

    def invalidate(self, restaurant_id: int) -> None:
        self._versions[restaurant_id] = self._versions.get(restaurant_id, 0) + 1
        if self._cache.pop(restaurant_id, None) is not None:
            logger.debug("Stats cache INVALIDATED (restaurant=%d)", restaurant_id)

    def clear(self) -> None:
        self._cache.clear()
        self._versions.clear()
        self._epoch += 1
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)
