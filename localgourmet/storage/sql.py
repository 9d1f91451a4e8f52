"""
Relational storage backend — async SQLAlchemy over PostgreSQL (asyncpg) in
production and SQLite (aiosqlite) in development and tests.

Every public method opens its own short-lived session. IntegrityErrors surface
as Conflict only where the caller names the constraint it expects (the menu-item
name index); any other SQLAlchemy error is logged and re-raised as
StorageFailure without its driver detail.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from localgourmet.database import build_engine, build_sessionmaker, check_db_connectivity
from localgourmet.exceptions import Conflict, StorageFailure
from localgourmet.models import Bookmark, MenuItem, Restaurant, Review
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

_DUPLICATE_MENU = "Duplicate menu item name"


class SqlStorage:
    """SQLAlchemy implementation of the Storage protocol."""

    name = "sql"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = build_sessionmaker(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlStorage":
        return cls(build_engine(database_url, echo=echo))

    @asynccontextmanager
    async def _session(self, conflict: Optional[str] = None) -> AsyncIterator[AsyncSession]:
        """
        Yield a session, translating driver errors into storage exceptions.

        `conflict` is the message for an expected IntegrityError; without it an
        integrity violation is an unexpected failure like any other.
        """
        async with self._session_factory() as session:
            try:
                yield session
            except IntegrityError as exc:
                await session.rollback()
                if conflict is None:
                    logger.error("Unexpected integrity violation: %s", exc)
                    raise StorageFailure() from exc
                logger.info("Integrity violation: %s", conflict)
                raise Conflict(conflict) from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Storage failure: %s", exc)
                raise StorageFailure() from exc

    # ── Restaurants ──────────────────────────────────────────────────────────

    async def list_restaurants(self, genre: Optional[str] = None) -> list[RestaurantRead]:
        stmt = select(Restaurant).order_by(Restaurant.id)
        if genre is not None:
            stmt = stmt.where(Restaurant.genre == genre)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [RestaurantRead.model_validate(r) for r in rows]

    async def get_restaurant(self, restaurant_id: int) -> Optional[RestaurantRead]:
        async with self._session() as session:
            row = await session.get(Restaurant, restaurant_id)
            return RestaurantRead.model_validate(row) if row else None

    async def get_restaurants(self, restaurant_ids: Iterable[int]) -> list[RestaurantRead]:
        ids = list(set(restaurant_ids))
        if not ids:
            return []
        stmt = select(Restaurant).where(Restaurant.id.in_(ids)).order_by(Restaurant.id)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [RestaurantRead.model_validate(r) for r in rows]

    async def find_restaurant(self, name: str, address: str) -> Optional[RestaurantRead]:
        stmt = (
            select(Restaurant)
            .where(Restaurant.name == name, Restaurant.address == address)
            .order_by(Restaurant.id)
            .limit(1)
        )
        async with self._session() as session:
            row = (await session.scalars(stmt)).first()
            return RestaurantRead.model_validate(row) if row else None

    async def create_restaurant(self, data: RestaurantCreate) -> RestaurantRead:
        async with self._session() as session:
            row = Restaurant(**data.model_dump(exclude={"menus"}))
            session.add(row)
            await session.commit()
            return RestaurantRead.model_validate(row)

    async def update_restaurant(
        self, restaurant_id: int, patch: RestaurantUpdate
    ) -> Optional[RestaurantRead]:
        async with self._session() as session:
            row = await session.get(Restaurant, restaurant_id)
            if row is None:
                return None
            for key, value in patch.model_dump(exclude_unset=True).items():
                setattr(row, key, value)
            await session.commit()
            return RestaurantRead.model_validate(row)

    async def delete_restaurant(self, restaurant_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(
                delete(Restaurant).where(Restaurant.id == restaurant_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def create_restaurant_with_menus(
        self, data: RestaurantCreate, menus: Sequence[MenuItemCreate]
    ) -> tuple[RestaurantRead, list[MenuItemRead]]:
        duplicate = first_duplicate(m.name for m in menus)
        conflict = f"{_DUPLICATE_MENU}: {duplicate}" if duplicate else _DUPLICATE_MENU

        # Restaurant and menu rows share one transaction; a failed insert rolls back both.
        async with self._session(conflict=conflict) as session:
            async with session.begin():
                restaurant = Restaurant(**data.model_dump(exclude={"menus"}))
                session.add(restaurant)
                await session.flush()

                items = [
                    MenuItem(restaurant_id=restaurant.id, **m.model_dump())
                    for m in menus
                ]
                session.add_all(items)
                await session.flush()

            logger.info(
                "Created restaurant %d with %d menu items", restaurant.id, len(items)
            )
            return (
                RestaurantRead.model_validate(restaurant),
                [MenuItemRead.model_validate(i) for i in items],
            )

    # ── Reviews ──────────────────────────────────────────────────────────────

    async def list_reviews(
        self,
        restaurant_ids: Optional[Iterable[int]] = None,
        owner_token: Optional[str] = None,
    ) -> list[ReviewRead]:
        stmt = select(Review).order_by(Review.id)
        if restaurant_ids is not None:
            ids = list(set(restaurant_ids))
            if not ids:
                return []
            stmt = stmt.where(Review.restaurant_id.in_(ids))
        if owner_token is not None:
            stmt = stmt.where(Review.owner_token == owner_token)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [ReviewRead.model_validate(r) for r in rows]

    async def get_review(self, review_id: int) -> Optional[ReviewRead]:
        async with self._session() as session:
            row = await session.get(Review, review_id)
            return ReviewRead.model_validate(row) if row else None

    async def create_review(self, data: ReviewCreate, owner_token: str) -> ReviewRead:
        async with self._session() as session:
            row = Review(owner_token=owner_token, **data.model_dump())
            session.add(row)
            await session.commit()
            return ReviewRead.model_validate(row)

    async def update_review(self, review_id: int, patch: ReviewUpdate) -> Optional[ReviewRead]:
        async with self._session() as session:
            row = await session.get(Review, review_id)
            if row is None:
                return None
            for key, value in patch.model_dump(exclude_unset=True).items():
                setattr(row, key, value)
            await session.commit()
            return ReviewRead.model_validate(row)

    async def delete_review(self, review_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(delete(Review).where(Review.id == review_id))
            await session.commit()
            return result.rowcount > 0

    # ── Bookmarks ────────────────────────────────────────────────────────────

    async def list_bookmarks(self, owner_token: str) -> list[BookmarkRead]:
        stmt = (
            select(Bookmark)
            .where(Bookmark.owner_token == owner_token)
            .order_by(Bookmark.id)
        )
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [BookmarkRead.model_validate(b) for b in rows]

    async def find_bookmark(
        self, restaurant_id: int, owner_token: str
    ) -> Optional[BookmarkRead]:
        stmt = (
            select(Bookmark)
            .where(
                Bookmark.restaurant_id == restaurant_id,
                Bookmark.owner_token == owner_token,
            )
            .order_by(Bookmark.id)
            .limit(1)
        )
        async with self._session() as session:
            row = (await session.scalars(stmt)).first()
            return BookmarkRead.model_validate(row) if row else None

    async def create_bookmark(self, restaurant_id: int, owner_token: str) -> BookmarkRead:
        async with self._session() as session:
            row = Bookmark(restaurant_id=restaurant_id, owner_token=owner_token)
            session.add(row)
            await session.commit()
            return BookmarkRead.model_validate(row)

    async def delete_bookmarks(self, restaurant_id: int, owner_token: str) -> int:
        async with self._session() as session:
            result = await session.execute(
                delete(Bookmark).where(
                    Bookmark.restaurant_id == restaurant_id,
                    Bookmark.owner_token == owner_token,
                )
            )
            await session.commit()
            return result.rowcount

    # ── Menu items ───────────────────────────────────────────────────────────

    async def list_menu_items(
        self,
        restaurant_id: Optional[int] = None,
        popular: Optional[bool] = None,
    ) -> list[MenuItemRead]:
        stmt = select(MenuItem).order_by(MenuItem.id)
        if restaurant_id is not None:
            stmt = stmt.where(MenuItem.restaurant_id == restaurant_id)
        if popular is not None:
            stmt = stmt.where(MenuItem.is_popular == popular)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [MenuItemRead.model_validate(m) for m in rows]

    async def get_menu_item(self, item_id: int) -> Optional[MenuItemRead]:
        async with self._session() as session:
            row = await session.get(MenuItem, item_id)
            return MenuItemRead.model_validate(row) if row else None

    async def create_menu_item(self, restaurant_id: int, data: MenuItemCreate) -> MenuItemRead:
        async with self._session(conflict=f"{_DUPLICATE_MENU}: {data.name}") as session:
            row = MenuItem(restaurant_id=restaurant_id, **data.model_dump())
            session.add(row)
            await session.commit()
            return MenuItemRead.model_validate(row)

    async def update_menu_item(
        self, item_id: int, patch: MenuItemUpdate
    ) -> Optional[MenuItemRead]:
        changes = patch.model_dump(exclude_unset=True)
        conflict = f"{_DUPLICATE_MENU}: {changes['name']}" if "name" in changes else None
        async with self._session(conflict=conflict) as session:
            row = await session.get(MenuItem, item_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            await session.commit()
            return MenuItemRead.model_validate(row)

    async def delete_menu_item(self, item_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(delete(MenuItem).where(MenuItem.id == item_id))
            await session.commit()
            return result.rowcount > 0

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def ping(self) -> bool:
        return await check_db_connectivity(self._session_factory)

    async def close(self) -> None:
        await self.engine.dispose()
