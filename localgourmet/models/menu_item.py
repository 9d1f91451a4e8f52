"""MenuItem ORM model."""

from sqlalchemy import Boolean, Column, Integer, Text, UniqueConstraint

from localgourmet.database import Base


class MenuItem(Base):
    """A dish on a restaurant's menu. Names are unique per restaurant."""

    __tablename__ = "menu_items"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_menu_items_restaurant_name"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, nullable=False, index=True)
    name = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # smallest currency unit
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    is_popular = Column(Boolean, nullable=False, default=False)
