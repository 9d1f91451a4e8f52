"""Bookmark ORM model."""

from sqlalchemy import Column, Index, Integer, Text

from localgourmet.database import Base, UTCTimestamp, utcnow


class Bookmark(Base):
    """
    (restaurant_id, owner_token) should be unique, but this is not a storage
    constraint: the ownership layer keeps it idempotent and readers collapse
    duplicates left behind by concurrent creates.
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        Index("ix_bookmarks_owner_restaurant", "user_cookie", "restaurant_id"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, nullable=False)
    owner_token = Column("user_cookie", Text, nullable=False)

    created_at = Column(UTCTimestamp(), nullable=False, default=utcnow)
