"""SQLAlchemy ORM models package."""

from afritable.database import Base
from afritable.models.user import User, UserRole
from afritable.models.restaurant import PriceRange, Restaurant
from afritable.models.photo import Photo
from afritable.models.menu import MenuItem
from afritable.models.review import Review
from afritable.models.availability import Availability
from afritable.models.checkpoint import JobCheckpoint

__all__ = [
    "Base", "User", "UserRole", "PriceRange", "Restaurant", "Photo",
    "MenuItem", "Review", "Availability", "JobCheckpoint",
]
