from __future__ import annotations

import pytest

from localgourmet.exceptions import Conflict, NotFound
from localgourmet.schemas import ListingCreate
from tests.factories import menu_data, restaurant_data


async def test_listing_with_menus(storage, listings):
    listing = ListingCreate(
        **restaurant_data("とやま鮨").model_dump(),
        menus=[menu_data("白えび丼", 1800, popular=True), menu_data("ます寿司", 1500)],
    )

    restaurant = await listings.create_restaurant(listing)

    assert restaurant.name == "とやま鮨"
    items = await storage.list_menu_items(restaurant_id=restaurant.id)
    assert [(i.name, i.price, i.is_popular) for i in items] == [
        ("白えび丼", 1800, True),
        ("ます寿司", 1500, False),
    ]


async def test_explicit_menus_argument(storage, listings):
    restaurant = await listings.create_restaurant(restaurant_data("李白"), [menu_data("麻婆豆腐")])
    assert len(await storage.list_menu_items(restaurant_id=restaurant.id)) == 1


async def test_same_name_and_address_conflicts(storage, listings):
    await listings.create_restaurant(restaurant_data("MESO", address="射水市戸破1730-4"))

    with pytest.raises(Conflict):
        await listings.create_restaurant(restaurant_data("MESO", address="射水市戸破1730-4"))

    # same name elsewhere is a different restaurant
    await listings.create_restaurant(restaurant_data("MESO", address="富山市"))
    assert len(await storage.list_restaurants()) == 2


async def test_duplicate_menu_leaves_no_restaurant(storage, listings):
    listing = ListingCreate(
        **restaurant_data("はつ花").model_dump(),
        menus=[menu_data("うどん"), menu_data("うどん")],
    )

    with pytest.raises(Conflict):
        await listings.create_restaurant(listing)

    assert await storage.list_restaurants() == []
    assert await storage.list_menu_items() == []


async def test_add_menu_item(storage, listings):
    restaurant = await listings.create_restaurant(restaurant_data("不二家"))
    item = await listings.create_menu_item(restaurant.id, menu_data("かつ丼", 900, popular=True))
    assert item.restaurant_id == restaurant.id

    with pytest.raises(Conflict):
        await listings.create_menu_item(restaurant.id, menu_data("かつ丼"))


async def test_add_menu_item_to_unknown_restaurant(listings):
    with pytest.raises(NotFound):
        await listings.create_menu_item(999, menu_data("かつ丼"))
