"""Pydantic schemas package."""

from localgourmet.schemas.bookmark import BookmarkCreate, BookmarkRead
from localgourmet.schemas.common import (
    BookmarkStatus,
    CamelModel,
    SuccessResponse,
)
from localgourmet.schemas.menu_item import (
    MenuItemCreate,
    MenuItemRead,
    MenuItemUpdate,
    PopularMenuItem,
)
from localgourmet.schemas.restaurant import (
    ListingCreate,
    RestaurantCreate,
    RestaurantRead,
    RestaurantUpdate,
    RestaurantWithDetails,
    RestaurantWithStats,
)
from localgourmet.schemas.review import ReviewCreate, ReviewRead, ReviewUpdate

__all__ = [
    "CamelModel", "SuccessResponse", "BookmarkStatus",
    "BookmarkCreate", "BookmarkRead",
    "MenuItemCreate", "MenuItemRead", "MenuItemUpdate", "PopularMenuItem",
    "ListingCreate", "RestaurantCreate", "RestaurantRead", "RestaurantUpdate",
    "RestaurantWithStats", "RestaurantWithDetails",
    "ReviewCreate", "ReviewRead", "ReviewUpdate",
]
