"""Menu item ORM model."""

from sqlalchemy import Column, Integer, Text, String, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from afritable.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        Integer,
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(8, 2), nullable=True)
    category = Column(String(64), nullable=True)   # 'Appetizers' | 'Mains' | ...
    is_available = Column(Boolean, nullable=False, default=True)

    restaurant = relationship("Restaurant", back_populates="menu_items")
