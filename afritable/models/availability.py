"""Availability ORM model — bookable capacity per restaurant, day, time and party size."""

from sqlalchemy import (
    Column, Integer, String, Date, TIMESTAMP, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from afritable.database import Base


class Availability(Base):
    """
    One capacity record. Capacity is tracked per party size, so the
    upsert key is (restaurant_id, date, time_slot, max_party_size).
    """

    __tablename__ = "availability"
    __table_args__ = (
        UniqueConstraint(
            "restaurant_id", "date", "time_slot", "max_party_size",
            name="uq_availability_slot",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(Date, nullable=False)
    time_slot = Column(String(5), nullable=False)     # 'HH:MM'
    max_party_size = Column(Integer, nullable=False)
    available_slots = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    restaurant = relationship("Restaurant", back_populates="availability")
