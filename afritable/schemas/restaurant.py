"""Pydantic schemas for the restaurant directory API."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from afritable.models.restaurant import PriceRange


class PhotoRead(BaseModel):
    id: int
    url: str
    caption: Optional[str] = None
    is_primary: bool = False

    model_config = ConfigDict(from_attributes=True)


class MenuItemRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewRead(BaseModel):
    id: int
    rating: float
    comment: Optional[str] = None
    is_verified: bool = False
    created_at: Optional[dt.datetime] = None
    author: Optional[str] = None        # "First L."

    model_config = ConfigDict(from_attributes=True)


class RestaurantSummary(BaseModel):
    """
    A listing row. Carries the primary photo only; the detail endpoint
    returns every photo.
    """

    id: int
    name: str
    description: Optional[str] = None
    cuisine: list[str] = Field(default_factory=list)
    address: Optional[str] = None
    city: str = ""
    state: str = ""
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    price_range: PriceRange = PriceRange.MODERATE
    rating: float = 0.0
    review_count: int = 0
    accepts_reservations: bool = True
    primary_photo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RestaurantDetail(RestaurantSummary):
    country: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    hours: Optional[dict[str, str]] = None
    has_delivery: bool = False
    has_takeout: bool = False
    has_outdoor_seating: bool = False
    has_wifi: bool = False
    has_parking: bool = False
    is_wheelchair_accessible: bool = False
    is_verified: bool = False

    photos: list[PhotoRead] = Field(default_factory=list)
    menu: list[MenuItemRead] = Field(default_factory=list)
    reviews: list[ReviewRead] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class RestaurantListResponse(BaseModel):
    data: list[RestaurantSummary]
    pagination: Pagination


class ReviewListResponse(BaseModel):
    data: list[ReviewRead]
    pagination: Pagination


class AvailabilitySlot(BaseModel):
    date: dt.date
    time_slot: str
    max_party_size: int
    available_slots: int

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    restaurant_id: int
    date: dt.date
    party_size: int
    data: list[AvailabilitySlot]


class CuisineListResponse(BaseModel):
    data: list[str]
