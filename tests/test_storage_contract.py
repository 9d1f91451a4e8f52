"""Behaviour every storage backend must share; each test runs on memory and sql.

The SQL error-mapping tests at the end run on SQLite only.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from localgourmet.database import create_tables
from localgourmet.exceptions import Conflict, StorageFailure
from localgourmet.schemas import MenuItemUpdate, RestaurantUpdate, ReviewUpdate
from localgourmet.storage import SqlStorage, Storage
from tests.factories import add_restaurant, add_review, menu_data, restaurant_data


async def test_backend_satisfies_protocol(storage):
    assert isinstance(storage, Storage)


async def test_ids_are_counted_per_entity_type(storage):
    first = await add_restaurant(storage, "MESO")
    second = await add_restaurant(storage, "李白")
    review = await add_review(storage, second.id, 4)
    bookmark = await storage.create_bookmark(first.id, "user1")

    assert (first.id, second.id) == (1, 2)
    assert review.id == 1
    assert bookmark.id == 1


async def test_ids_are_not_reused_after_delete(storage):
    await add_restaurant(storage, "A")
    second = await add_restaurant(storage, "B")
    await storage.delete_restaurant(second.id)
    third = await add_restaurant(storage, "C")
    assert third.id == second.id + 1


async def test_restaurant_round_trip_keeps_fields(storage):
    created = await storage.create_restaurant(
        restaurant_data("不二家", features=["かつ丼", "親子丼", "不二家丼"], latitude=36.72048)
    )
    fetched = await storage.get_restaurant(created.id)

    assert fetched.name == "不二家"
    assert fetched.features == ["かつ丼", "親子丼", "不二家丼"]
    assert fetched.latitude == pytest.approx(36.72048)
    assert fetched.is_open is True
    assert fetched.created_at is not None


async def test_timestamps_read_back_as_aware_utc(storage):
    restaurant = await add_restaurant(storage)
    review = await add_review(storage, restaurant.id, 4)
    bookmark = await storage.create_bookmark(restaurant.id, "user1")

    fetched = [
        (restaurant, await storage.get_restaurant(restaurant.id)),
        (review, await storage.get_review(review.id)),
        (bookmark, (await storage.list_bookmarks("user1"))[0]),
    ]
    for created, read in fetched:
        assert read.created_at.utcoffset() == timedelta(0)
        assert read.created_at == created.created_at


async def test_missing_rows_are_none_not_errors(storage):
    assert await storage.get_restaurant(404) is None
    assert await storage.get_review(404) is None
    assert await storage.get_menu_item(404) is None
    assert await storage.find_bookmark(404, "user1") is None
    assert await storage.update_review(404, ReviewUpdate(rating=3)) is None
    assert await storage.delete_review(404) is False
    assert await storage.delete_restaurant(404) is False
    assert await storage.delete_bookmarks(404, "user1") == 0


async def test_list_restaurants_insertion_order_and_exact_genre(storage):
    await add_restaurant(storage, "MESO", genre="中華")
    await add_restaurant(storage, "ラーメン豚鶏歓", genre="ラーメン")
    await add_restaurant(storage, "李白", genre="中華")

    assert [r.name for r in await storage.list_restaurants()] == ["MESO", "ラーメン豚鶏歓", "李白"]
    assert [r.name for r in await storage.list_restaurants(genre="中華")] == ["MESO", "李白"]
    assert await storage.list_restaurants(genre="中") == []


async def test_genre_filter_is_case_sensitive(storage):
    await add_restaurant(storage, "Bagel Bar", genre="Bakery")
    assert await storage.list_restaurants(genre="bakery") == []


async def test_get_restaurants_skips_unknown_ids(storage):
    a = await add_restaurant(storage, "A")
    b = await add_restaurant(storage, "B")
    found = await storage.get_restaurants([b.id, 999, a.id])
    assert [r.id for r in found] == [a.id, b.id]
    assert await storage.get_restaurants([]) == []


async def test_find_restaurant_matches_name_and_address(storage):
    await add_restaurant(storage, "MESO", address="射水市戸破1730-4")
    assert await storage.find_restaurant("MESO", "射水市戸破1730-4") is not None
    assert await storage.find_restaurant("MESO", "elsewhere") is None


async def test_update_restaurant_applies_only_sent_fields(storage):
    r = await add_restaurant(storage, "MESO", phone="0766-55-5524")
    updated = await storage.update_restaurant(r.id, RestaurantUpdate(is_open=False))
    assert updated.is_open is False
    assert updated.phone == "0766-55-5524"
    assert await storage.update_restaurant(999, RestaurantUpdate(is_open=False)) is None


async def test_review_filters(storage):
    a = await add_restaurant(storage, "A")
    b = await add_restaurant(storage, "B")
    await add_review(storage, a.id, 5, token="user1")
    await add_review(storage, b.id, 3, token="user1")
    await add_review(storage, a.id, 1, token="user2")

    assert [r.rating for r in await storage.list_reviews(restaurant_ids=[a.id])] == [5, 1]
    assert [r.rating for r in await storage.list_reviews(owner_token="user1")] == [5, 3]
    assert [r.rating for r in await storage.list_reviews(restaurant_ids=[a.id], owner_token="user2")] == [1]
    assert await storage.list_reviews(restaurant_ids=[]) == []


async def test_review_keeps_owner_token(storage):
    r = await add_restaurant(storage)
    review = await add_review(storage, r.id, 4, token="opaque-token-123")
    assert (await storage.get_review(review.id)).owner_token == "opaque-token-123"


async def test_update_review_patch(storage):
    r = await add_restaurant(storage)
    review = await add_review(storage, r.id, 2)
    updated = await storage.update_review(review.id, ReviewUpdate(rating=5))
    assert updated.rating == 5
    assert updated.nickname == review.nickname
    assert updated.owner_token == review.owner_token


async def test_bookmarks_are_not_unique_at_storage_level(storage):
    r = await add_restaurant(storage)
    await storage.create_bookmark(r.id, "user1")
    await storage.create_bookmark(r.id, "user1")
    assert len(await storage.list_bookmarks("user1")) == 2
    assert await storage.delete_bookmarks(r.id, "user1") == 2
    assert await storage.list_bookmarks("user1") == []


async def test_deleting_restaurant_leaves_dependents_dangling(storage):
    r = await add_restaurant(storage)
    await add_review(storage, r.id, 4)
    await storage.create_bookmark(r.id, "user1")
    await storage.create_menu_item(r.id, menu_data("中華そば"))

    assert await storage.delete_restaurant(r.id) is True
    assert len(await storage.list_reviews(restaurant_ids=[r.id])) == 1
    assert len(await storage.list_bookmarks("user1")) == 1
    assert len(await storage.list_menu_items(restaurant_id=r.id)) == 1


async def test_menu_item_filters(storage):
    a = await add_restaurant(storage, "A")
    b = await add_restaurant(storage, "B")
    await storage.create_menu_item(a.id, menu_data("かつ丼", popular=True))
    await storage.create_menu_item(a.id, menu_data("そば"))
    await storage.create_menu_item(b.id, menu_data("マーボーご飯", popular=True))

    assert [m.name for m in await storage.list_menu_items(restaurant_id=a.id)] == ["かつ丼", "そば"]
    assert [m.name for m in await storage.list_menu_items(popular=True)] == ["かつ丼", "マーボーご飯"]
    assert [m.name for m in await storage.list_menu_items(popular=False)] == ["そば"]


async def test_duplicate_menu_name_conflicts_within_restaurant_only(storage):
    a = await add_restaurant(storage, "A")
    b = await add_restaurant(storage, "B")
    await storage.create_menu_item(a.id, menu_data("かつ丼"))
    await storage.create_menu_item(b.id, menu_data("かつ丼"))

    with pytest.raises(Conflict):
        await storage.create_menu_item(a.id, menu_data("かつ丼", price=900))
    assert len(await storage.list_menu_items(restaurant_id=a.id)) == 1


async def test_menu_item_rename_to_existing_name_conflicts(storage):
    r = await add_restaurant(storage)
    await storage.create_menu_item(r.id, menu_data("親子丼"))
    other = await storage.create_menu_item(r.id, menu_data("かつ丼"))

    with pytest.raises(Conflict):
        await storage.update_menu_item(other.id, MenuItemUpdate(name="親子丼"))
    renamed = await storage.update_menu_item(other.id, MenuItemUpdate(name="カツカレー", price=1100))
    assert (renamed.name, renamed.price) == ("カツカレー", 1100)


async def test_delete_menu_item(storage):
    r = await add_restaurant(storage)
    item = await storage.create_menu_item(r.id, menu_data("うどん"))
    assert await storage.delete_menu_item(item.id) is True
    assert await storage.get_menu_item(item.id) is None


# ── Compound create ──────────────────────────────────────────────────────────


async def test_compound_create_persists_restaurant_and_menus(storage):
    restaurant, items = await storage.create_restaurant_with_menus(
        restaurant_data("はつ花"),
        [menu_data("もつ煮込みうどん", popular=True), menu_data("きつねうどん")],
    )
    assert [i.restaurant_id for i in items] == [restaurant.id, restaurant.id]
    assert [m.name for m in await storage.list_menu_items(restaurant_id=restaurant.id)] == [
        "もつ煮込みうどん",
        "きつねうどん",
    ]


async def test_compound_create_without_menus(storage):
    restaurant, items = await storage.create_restaurant_with_menus(restaurant_data("はつ花"), [])
    assert items == []
    assert await storage.get_restaurant(restaurant.id) is not None


async def test_failed_compound_create_leaves_nothing(storage):
    with pytest.raises(Conflict, match="もつ煮込みうどん"):
        await storage.create_restaurant_with_menus(
            restaurant_data("はつ花"),
            [menu_data("もつ煮込みうどん"), menu_data("天ぷら"), menu_data("もつ煮込みうどん")],
        )

    assert await storage.list_restaurants() == []
    assert await storage.list_menu_items() == []

    # the store is still usable afterwards
    restaurant, _ = await storage.create_restaurant_with_menus(
        restaurant_data("はつ花"), [menu_data("もつ煮込みうどん")]
    )
    assert await storage.get_restaurant(restaurant.id) is not None


async def test_compound_create_ignores_menus_left_by_a_deleted_restaurant(storage):
    old, _ = await storage.create_restaurant_with_menus(restaurant_data("はつ花"), [menu_data("天ぷら")])
    await storage.delete_restaurant(old.id)

    new, items = await storage.create_restaurant_with_menus(restaurant_data("はつ花"), [menu_data("天ぷら")])

    assert new.id != old.id
    assert [i.restaurant_id for i in items] == [new.id]
    assert len(await storage.list_menu_items(restaurant_id=old.id)) == 1


async def test_ping(storage):
    assert await storage.ping() is True


# ── SQL error mapping ────────────────────────────────────────────────────────


@pytest.fixture
async def sql_storage(tmp_path):
    store = SqlStorage.from_url(f"sqlite+aiosqlite:///{tmp_path / 'integrity.db'}")
    await create_tables(store.engine)
    yield store
    await store.close()


async def test_sql_integrity_error_without_expected_conflict_is_a_storage_failure(sql_storage):
    # owner_token is NOT NULL; only menu-name clashes are reported as conflicts
    with pytest.raises(StorageFailure):
        await sql_storage.create_bookmark(1, None)
    assert await sql_storage.list_bookmarks("user1") == []


async def test_sql_duplicate_menu_name_still_conflicts(sql_storage):
    restaurant = await add_restaurant(sql_storage)
    await sql_storage.create_menu_item(restaurant.id, menu_data("かつ丼"))
    with pytest.raises(Conflict, match="かつ丼"):
        await sql_storage.create_menu_item(restaurant.id, menu_data("かつ丼"))
