"""Restaurant ORM model."""

from sqlalchemy import JSON, Boolean, Column, Float, Integer, Text

from localgourmet.database import Base, UTCTimestamp, utcnow


class Restaurant(Base):
    """
    A crowd-sourced restaurant listing. Owned by no single user.
    Rating stats are never stored here; they are derived from reviews on read.
    """

    __tablename__ = "restaurants"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    genre = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    hours = Column(Text, nullable=True)
    price_range = Column(Text, nullable=True)

    features = Column(JSON, nullable=False, default=list)
    is_open = Column(Boolean, nullable=False, default=True)

    created_at = Column(UTCTimestamp(), nullable=False, default=utcnow)
