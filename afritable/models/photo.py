"""Photo ORM model."""

from sqlalchemy import (
    Column, Integer, Text, Boolean, TIMESTAMP, ForeignKey, func,
)
from sqlalchemy.orm import relationship

from afritable.database import Base


class Photo(Base):
    """
    An image of a restaurant. The first photo written by enrichment is the
    primary one; listings show only the primary photo.
    """

    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = Column(Text, nullable=False)
    caption = Column(Text, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    uploaded_by = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now()
    )

    restaurant = relationship("Restaurant", back_populates="photos")
