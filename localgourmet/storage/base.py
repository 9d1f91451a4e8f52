"""
Storage contract shared by the in-memory and relational backends.

Both backends must return identical observable results for every operation:
records come back in ascending id order, missing rows are ``None``/``False``
rather than exceptions, duplicate menu names raise ``Conflict`` and backend
faults raise ``StorageFailure``. No aggregation happens here — rating stats
are derived by the aggregation engine so no backend quirk can leak into them.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from localgourmet.schemas import (
    BookmarkRead,
    MenuItemCreate,
    MenuItemRead,
    MenuItemUpdate,
    RestaurantCreate,
    RestaurantRead,
    RestaurantUpdate,
    ReviewCreate,
    ReviewRead,
    ReviewUpdate,
)


@runtime_checkable
class Storage(Protocol):
    """Capability set every storage backend provides."""

    name: str

    # ── Restaurants ──────────────────────────────────────────────────────────

    async def list_restaurants(self, genre: Optional[str] = None) -> list[RestaurantRead]:
        """All restaurants, optionally restricted to an exact genre."""
        ...

    async def get_restaurant(self, restaurant_id: int) -> Optional[RestaurantRead]:
        ...

    async def get_restaurants(self, restaurant_ids: Iterable[int]) -> list[RestaurantRead]:
        """Restaurants whose id is in `restaurant_ids`; unknown ids are skipped."""
        ...

    async def find_restaurant(self, name: str, address: str) -> Optional[RestaurantRead]:
        """Exact (name, address) lookup used by the duplicate-listing guard."""
        ...

    async def create_restaurant(self, data: RestaurantCreate) -> RestaurantRead:
        ...

    async def update_restaurant(
        self, restaurant_id: int, patch: RestaurantUpdate
    ) -> Optional[RestaurantRead]:
        ...

    async def delete_restaurant(self, restaurant_id: int) -> bool:
        """Delete the restaurant row only; dependent rows are left dangling."""
        ...

    async def create_restaurant_with_menus(
        self, data: RestaurantCreate, menus: Sequence[MenuItemCreate]
    ) -> tuple[RestaurantRead, list[MenuItemRead]]:
        """All-or-nothing creation of a restaurant and its menu items."""
        ...

    # ── Reviews ──────────────────────────────────────────────────────────────

    async def list_reviews(
        self,
        restaurant_ids: Optional[Iterable[int]] = None,
        owner_token: Optional[str] = None,
    ) -> list[ReviewRead]:
        ...

    async def get_review(self, review_id: int) -> Optional[ReviewRead]:
        ...

    async def create_review(self, data: ReviewCreate, owner_token: str) -> ReviewRead:
        ...

    async def update_review(self, review_id: int, patch: ReviewUpdate) -> Optional[ReviewRead]:
        ...

    async def delete_review(self, review_id: int) -> bool:
        ...

    # ── Bookmarks ────────────────────────────────────────────────────────────

    async def list_bookmarks(self, owner_token: str) -> list[BookmarkRead]:
        ...

    async def find_bookmark(
        self, restaurant_id: int, owner_token: str
    ) -> Optional[BookmarkRead]:
        ...

    async def create_bookmark(self, restaurant_id: int, owner_token: str) -> BookmarkRead:
        """Plain insert — no uniqueness check at this layer."""
        ...

    async def delete_bookmarks(self, restaurant_id: int, owner_token: str) -> int:
        """Delete every matching bookmark; return how many were removed."""
        ...

    # ── Menu items ───────────────────────────────────────────────────────────

    async def list_menu_items(
        self,
        restaurant_id: Optional[int] = None,
        popular: Optional[bool] = None,
    ) -> list[MenuItemRead]:
        ...

    async def get_menu_item(self, item_id: int) -> Optional[MenuItemRead]:
        ...

    async def create_menu_item(self, restaurant_id: int, data: MenuItemCreate) -> MenuItemRead:
        ...

    async def update_menu_item(
        self, item_id: int, patch: MenuItemUpdate
    ) -> Optional[MenuItemRead]:
        ...

    async def delete_menu_item(self, item_id: int) -> bool:
        ...

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        ...


def first_duplicate(names: Iterable[str]) -> Optional[str]:
    """Return the first name that appears twice, or None."""
    seen: set[str] = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None
