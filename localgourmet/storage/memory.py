"""
In-memory storage backend — used for development and fast tests.

All state lives on one MemoryStorage instance (no module-level globals), so its
lifecycle is explicit: build one per process, or one per test. Each entity type
has its own monotonically increasing id counter; ids are never reused.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from localgourmet.exceptions import Conflict
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
from localgourmet.storage.base import first_duplicate

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStorage:
    """Dict-backed implementation of the Storage protocol."""

    name = "memory"

    def __init__(self) -> None:
        # dicts keep insertion order, which is ascending id order
        self._restaurants: dict[int, RestaurantRead] = {}
        self._reviews: dict[int, ReviewRead] = {}
        self._bookmarks: dict[int, BookmarkRead] = {}
        self._menu_items: dict[int, MenuItemRead] = {}
        self._next_ids: dict[str, int] = {
            "restaurant": 1,
            "review": 1,
            "bookmark": 1,
            "menu_item": 1,
        }

    def _allocate_id(self, entity: str) -> int:
        value = self._next_ids[entity]
        self._next_ids[entity] = value + 1
        return value

    # ── Restaurants ──────────────────────────────────────────────────────────

    async def list_restaurants(self, genre: Optional[str] = None) -> list[RestaurantRead]:
        return [
            r for r in self._restaurants.values()
            if genre is None or r.genre == genre
        ]

    async def get_restaurant(self, restaurant_id: int) -> Optional[RestaurantRead]:
        return self._restaurants.get(restaurant_id)

    async def get_restaurants(self, restaurant_ids: Iterable[int]) -> list[RestaurantRead]:
        wanted = set(restaurant_ids)
        return [r for rid, r in self._restaurants.items() if rid in wanted]

    async def find_restaurant(self, name: str, address: str) -> Optional[RestaurantRead]:
        for r in self._restaurants.values():
            if r.name == name and r.address == address:
                return r
        return None

    def _insert_restaurant(self, data: RestaurantCreate) -> RestaurantRead:
        restaurant = RestaurantRead(
            id=self._allocate_id("restaurant"),
            created_at=_now(),
            **data.model_dump(exclude={"menus"}),
        )
        self._restaurants[restaurant.id] = restaurant
        return restaurant

    async def create_restaurant(self, data: RestaurantCreate) -> RestaurantRead:
        return self._insert_restaurant(data)

    async def update_restaurant(
        self, restaurant_id: int, patch: RestaurantUpdate
    ) -> Optional[RestaurantRead]:
        current = self._restaurants.get(restaurant_id)
        if current is None:
            return None
        updated = current.model_copy(update=patch.model_dump(exclude_unset=True))
        self._restaurants[restaurant_id] = updated
        return updated

    async def delete_restaurant(self, restaurant_id: int) -> bool:
        return self._restaurants.pop(restaurant_id, None) is not None

    async def create_restaurant_with_menus(
        self, data: RestaurantCreate, menus: Sequence[MenuItemCreate]
    ) -> tuple[RestaurantRead, list[MenuItemRead]]:
        # The only way an insert below can fail is a clash inside the payload,
        # since a fresh restaurant id has no menu items yet.
        duplicate = first_duplicate(m.name for m in menus)
        if duplicate is not None:
            raise Conflict(f"Duplicate menu item name: {duplicate}")

        restaurant = self._insert_restaurant(data)
        items = [self._insert_menu_item(restaurant.id, menu) for menu in menus]
        return restaurant, items

    # ── Reviews ──────────────────────────────────────────────────────────────

    async def list_reviews(
        self,
        restaurant_ids: Optional[Iterable[int]] = None,
        owner_token: Optional[str] = None,
    ) -> list[ReviewRead]:
        wanted = set(restaurant_ids) if restaurant_ids is not None else None
        return [
            r for r in self._reviews.values()
            if (wanted is None or r.restaurant_id in wanted)
            and (owner_token is None or r.owner_token == owner_token)
        ]

    async def get_review(self, review_id: int) -> Optional[ReviewRead]:
        return self._reviews.get(review_id)

    async def create_review(self, data: ReviewCreate, owner_token: str) -> ReviewRead:
        review = ReviewRead(
            id=self._allocate_id("review"),
            owner_token=owner_token,
            created_at=_now(),
            **data.model_dump(),
        )
        self._reviews[review.id] = review
        return review

    async def update_review(self, review_id: int, patch: ReviewUpdate) -> Optional[ReviewRead]:
        current = self._reviews.get(review_id)
        if current is None:
            return None
        updated = current.model_copy(update=patch.model_dump(exclude_unset=True))
        self._reviews[review_id] = updated
        return updated

    async def delete_review(self, review_id: int) -> bool:
        return self._reviews.pop(review_id, None) is not None

    # ── Bookmarks ────────────────────────────────────────────────────────────

    async def list_bookmarks(self, owner_token: str) -> list[BookmarkRead]:
        return [b for b in self._bookmarks.values() if b.owner_token == owner_token]

    async def find_bookmark(
        self, restaurant_id: int, owner_token: str
    ) -> Optional[BookmarkRead]:
        for b in self._bookmarks.values():
            if b.restaurant_id == restaurant_id and b.owner_token == owner_token:
                return b
        return None

    async def create_bookmark(self, restaurant_id: int, owner_token: str) -> BookmarkRead:
        bookmark = BookmarkRead(
            id=self._allocate_id("bookmark"),
            restaurant_id=restaurant_id,
            owner_token=owner_token,
            created_at=_now(),
        )
        self._bookmarks[bookmark.id] = bookmark
        return bookmark

    async def delete_bookmarks(self, restaurant_id: int, owner_token: str) -> int:
        doomed = [
            bid for bid, b in self._bookmarks.items()
            if b.restaurant_id == restaurant_id and b.owner_token == owner_token
        ]
        for bid in doomed:
            del self._bookmarks[bid]
        return len(doomed)

    # ── Menu items ───────────────────────────────────────────────────────────

    async def list_menu_items(
        self,
        restaurant_id: Optional[int] = None,
        popular: Optional[bool] = None,
    ) -> list[MenuItemRead]:
        return [
            m for m in self._menu_items.values()
            if (restaurant_id is None or m.restaurant_id == restaurant_id)
            and (popular is None or m.is_popular == popular)
        ]

    async def get_menu_item(self, item_id: int) -> Optional[MenuItemRead]:
        return self._menu_items.get(item_id)

    def _name_taken(self, restaurant_id: int, name: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            m.restaurant_id == restaurant_id and m.name == name and m.id != exclude_id
            for m in self._menu_items.values()
        )

    def _insert_menu_item(self, restaurant_id: int, data: MenuItemCreate) -> MenuItemRead:
        if self._name_taken(restaurant_id, data.name):
            raise Conflict(f"Duplicate menu item name: {data.name}")
        item = MenuItemRead(
            id=self._allocate_id("menu_item"),
            restaurant_id=restaurant_id,
            **data.model_dump(),
        )
        self._menu_items[item.id] = item
        return item

    async def create_menu_item(self, restaurant_id: int, data: MenuItemCreate) -> MenuItemRead:
        return self._insert_menu_item(restaurant_id, data)

    async def update_menu_item(
        self, item_id: int, patch: MenuItemUpdate
    ) -> Optional[MenuItemRead]:
        current = self._menu_items.get(item_id)
        if current is None:
            return None
        changes = patch.model_dump(exclude_unset=True)
        new_name = changes.get("name")
        if new_name is not None and self._name_taken(current.restaurant_id, new_name, exclude_id=item_id):
            raise Conflict(f"Duplicate menu item name: {new_name}")
        updated = current.model_copy(update=changes)
        self._menu_items[item_id] = updated
        return updated

    async def delete_menu_item(self, item_id: int) -> bool:
        return self._menu_items.pop(item_id, None) is not None

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        logger.debug(
            "Discarding in-memory store (%d restaurants, %d reviews)",
            len(self._restaurants), len(self._reviews),
        )
