"""
Listing service — crowd-sourced restaurant and menu creation.

Listings are not owned by anyone: any caller may add one. The only guards are
duplicate checks, a restaurant by (name, address) and a menu item by name
within its restaurant.
"""

from __future__ import annotations

import logging
from typing import Sequence

from localgourmet.exceptions import Conflict, NotFound
from localgourmet.schemas import (
    ListingCreate,
    MenuItemCreate,
    MenuItemRead,
    RestaurantCreate,
    RestaurantRead,
)
from localgourmet.storage.base import Storage

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def create_restaurant(
        self,
        data: RestaurantCreate,
        menus: Sequence[MenuItemCreate] = (),
    ) -> RestaurantRead:
        """Create a restaurant with its initial menu, atomically."""
        if isinstance(data, ListingCreate) and not menus:
            menus = data.menus

        if await self.storage.find_restaurant(data.name, data.address) is not None:
            raise Conflict("A restaurant with this name and address already exists")

        restaurant, items = await self.storage.create_restaurant_with_menus(data, menus)
        logger.info(
            "Listed restaurant %d (%s) with %d menu items",
            restaurant.id, restaurant.name, len(items),
        )
        return restaurant

    async def create_menu_item(self, restaurant_id: int, data: MenuItemCreate) -> MenuItemRead:
        if await self.storage.get_restaurant(restaurant_id) is None:
            raise NotFound("Restaurant not found")
        item = await self.storage.create_menu_item(restaurant_id, data)
        logger.info("Added menu item %d to restaurant %d", item.id, restaurant_id)
        return item
