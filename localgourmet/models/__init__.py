"""SQLAlchemy ORM models package."""

from localgourmet.database import Base
from localgourmet.models.restaurant import Restaurant
from localgourmet.models.review import Review
from localgourmet.models.bookmark import Bookmark
from localgourmet.models.menu_item import MenuItem

__all__ = ["Base", "Restaurant", "Review", "Bookmark", "MenuItem"]
