"""Restaurant ORM model."""

import enum

from sqlalchemy import (
    Column, Integer, Text, String, Boolean, Float, JSON,
    Enum, TIMESTAMP, func,
)
from sqlalchemy.orm import relationship

from afritable.database import Base


class PriceRange(str, enum.Enum):
    BUDGET = "BUDGET"
    MODERATE = "MODERATE"
    EXPENSIVE = "EXPENSIVE"
    VERY_EXPENSIVE = "VERY_EXPENSIVE"


class Restaurant(Base):
    """
    A directory listing. Owns photos, menu items, reviews and availability
    slots; those rows must be removed before (or with) the restaurant.
    """

    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    cuisine = Column(JSON, nullable=False, default=list)   # ["Ethiopian", "African"]

    address = Column(Text, nullable=True)
    city = Column(Text, nullable=False, default="")
    state = Column(String(64), nullable=False, default="")
    zip_code = Column(String(16), nullable=True)
    country = Column(String(64), nullable=True)             # 'US' | 'NG' | free text
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    phone = Column(String(32), nullable=True)
    website = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    hours = Column(JSON, nullable=True)                     # {"monday": "11:00-22:00", ...}

    price_range = Column(
        Enum(PriceRange, name="price_range"),
        nullable=False,
        default=PriceRange.MODERATE,
    )
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    has_delivery = Column(Boolean, nullable=False, default=False)
    has_takeout = Column(Boolean, nullable=False, default=False)
    has_outdoor_seating = Column(Boolean, nullable=False, default=False)
    has_wifi = Column(Boolean, nullable=False, default=False)
    has_parking = Column(Boolean, nullable=False, default=False)
    is_wheelchair_accessible = Column(Boolean, nullable=False, default=False)
    accepts_reservations = Column(Boolean, nullable=False, default=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    google_place_id = Column(String(255), nullable=True, index=True)

    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    photos = relationship(
        "Photo", back_populates="restaurant", cascade="all, delete-orphan"
    )
    menu_items = relationship(
        "MenuItem", back_populates="restaurant", cascade="all, delete-orphan"
    )
    reviews = relationship(
        "Review", back_populates="restaurant", cascade="all, delete-orphan"
    )
    availability = relationship(
        "Availability", back_populates="restaurant", cascade="all, delete-orphan"
    )

    @property
    def cuisine_text(self) -> str:
        """Cuisine tags joined for keyword matching and display."""
        return ", ".join(self.cuisine or [])
