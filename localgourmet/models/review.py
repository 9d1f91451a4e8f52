"""Review ORM model."""

from sqlalchemy import Column, Integer, Text

from localgourmet.database import Base, UTCTimestamp, utcnow


class Review(Base):
    """
    A rating left by an anonymous client, identified only by its owner token.
    restaurant_id is indexed but not a FOREIGN KEY: restaurants are deleted
    without cascading, and reads must tolerate the orphaned rows.
    """

    __tablename__ = "reviews"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(Integer, nullable=False, index=True)
    owner_token = Column("user_cookie", Text, nullable=False, index=True)

    nickname = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)

    created_at = Column(UTCTimestamp(), nullable=False, default=utcnow)
