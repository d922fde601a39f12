"""Pydantic schemas package."""

from afritable.schemas.restaurant import (
    AvailabilityResponse,
    AvailabilitySlot,
    CuisineListResponse,
    MenuItemRead,
    Pagination,
    PhotoRead,
    RestaurantDetail,
    RestaurantListResponse,
    RestaurantSummary,
    ReviewListResponse,
    ReviewRead,
)

__all__ = [
    "AvailabilityResponse", "AvailabilitySlot", "CuisineListResponse",
    "MenuItemRead", "Pagination", "PhotoRead", "RestaurantDetail",
    "RestaurantListResponse", "RestaurantSummary", "ReviewListResponse", "ReviewRead",
]
