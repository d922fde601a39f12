"""
Restaurant directory endpoints: read-only views over the store.

Endpoints:
  GET /restaurants                          filtered, paginated listing
  GET /restaurants/cuisines/list            distinct cuisine tags
  GET /restaurants/{id}                     detail with photos, menu, latest reviews
  GET /restaurants/{id}/reviews             paginated reviews, newest first
  GET /restaurants/{id}/availability        bookable slots for a date
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Literal, Optional

from cachetools import TTLCache
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from afritable.database import get_db
from afritable.models import Availability, MenuItem, Photo, PriceRange, Restaurant, Review, User
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

_SORT_COLUMNS = {
    "rating": Restaurant.rating,
    "name": Restaurant.name,
    "review_count": Restaurant.review_count,
}

REVIEWS_ON_DETAIL = 10

# Distinct cuisine tags change only when jobs run
# Key  : "cuisines"
# Value: list[str], sorted
# TTL  : 300 s
_cache_cuisines: TTLCache = TTLCache(maxsize=1, ttl=300)


def _primary_photo_subquery():
    return (
        select(Photo.url)
        .where(Photo.restaurant_id == Restaurant.id, Photo.is_primary.is_(True))
        .order_by(Photo.id)
        .limit(1)
        .correlate(Restaurant)
        .scalar_subquery()
    )


async def _get_active_restaurant(db: AsyncSession, restaurant_id: int, *options) -> Restaurant:
    result = await db.execute(
        select(Restaurant).where(Restaurant.id == restaurant_id).options(*options)
    )
    restaurant = result.scalar_one_or_none()
    if restaurant is None or not restaurant.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Restaurant not found",
        )
    return restaurant


def _reviews_query(restaurant_id: int):
    return (
        select(Review, User.first_name, User.last_name)
        .join(User, User.id == Review.user_id)
        .where(Review.restaurant_id == restaurant_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )


def _review_items(rows) -> list[ReviewRead]:
    """Reviews with the author shown as first name and last initial."""
    reviews: list[ReviewRead] = []
    for review, first_name, last_name in rows:
        item = ReviewRead.model_validate(review)
        if first_name:
            item.author = f"{first_name} {last_name[0]}." if last_name else first_name
        reviews.append(item)
    return reviews


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: Optional[str] = Query(default=None, max_length=200),
    cuisine: Optional[str] = Query(default=None, max_length=100),
    city: Optional[str] = Query(default=None, max_length=100),
    state: Optional[str] = Query(default=None, max_length=100),
    price_range: Optional[PriceRange] = None,
    min_rating: Optional[float] = Query(default=None, ge=0, le=5),
    sort_by: Literal["rating", "name", "review_count"] = "rating",
    sort_order: Literal["asc", "desc"] = "desc",
    db: AsyncSession = Depends(get_db),
) -> RestaurantListResponse:
    """
    List active restaurants.

    - `search` matches name, description and cuisine (case-insensitive)
    - `cuisine`, `city`, `state` are substring filters
    - `min_rating` keeps restaurants rated at or above the value
    """
    filters = [Restaurant.is_active.is_(True)]
    cuisine_text = cast(Restaurant.cuisine, String)

    if search:
        pattern = f"%{search.strip()}%"
        filters.append(
            or_(
                Restaurant.name.ilike(pattern),
                Restaurant.description.ilike(pattern),
                cuisine_text.ilike(pattern),
            )
        )
    if cuisine:
        filters.append(cuisine_text.ilike(f"%{cuisine.strip()}%"))
    if city:
        filters.append(Restaurant.city.ilike(f"%{city.strip()}%"))
    if state:
        filters.append(Restaurant.state.ilike(f"%{state.strip()}%"))
    if price_range is not None:
        filters.append(Restaurant.price_range == price_range)
    if min_rating is not None:
        filters.append(Restaurant.rating >= min_rating)

    total = await db.scalar(select(func.count(Restaurant.id)).where(*filters)) or 0

    column = _SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    result = await db.execute(
        select(Restaurant, _primary_photo_subquery().label("primary_photo"))
        .where(*filters)
        .order_by(ordering, Restaurant.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )

    data: list[RestaurantSummary] = []
    for restaurant, primary_photo in result.all():
        summary = RestaurantSummary.model_validate(restaurant)
        summary.primary_photo = primary_photo
        data.append(summary)

    return RestaurantListResponse(
        data=data,
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit) if total else 0,
        ),
    )


@router.get("/cuisines/list", response_model=CuisineListResponse)
async def list_cuisines(db: AsyncSession = Depends(get_db)) -> CuisineListResponse:
    """Return the sorted, de-duplicated cuisine tags of active restaurants."""
    cached = _cache_cuisines.get("cuisines")
    if cached is not None:
        logger.debug("Cuisine cache HIT")
        return CuisineListResponse(data=cached)

    result = await db.execute(
        select(Restaurant.cuisine).where(Restaurant.is_active.is_(True))
    )
    tags: set[str] = set()
    for (cuisine,) in result.all():
        for tag in cuisine or []:
            tag = str(tag).strip()
            if tag:
                tags.add(tag)
    data = sorted(tags, key=str.lower)
    _cache_cuisines["cuisines"] = data
    return CuisineListResponse(data=data)


@router.get("/{restaurant_id}", response_model=RestaurantDetail)
async def get_restaurant(
    restaurant_id: int,
    db: AsyncSession = Depends(get_db),
) -> RestaurantDetail:
    """Full restaurant detail: every photo, available menu items, latest reviews."""
    restaurant = await _get_active_restaurant(
        db,
        restaurant_id,
        selectinload(Restaurant.photos),
        selectinload(Restaurant.menu_items),
    )

    reviews_result = await db.execute(_reviews_query(restaurant_id).limit(REVIEWS_ON_DETAIL))
    reviews = _review_items(reviews_result.all())

    photos = sorted(restaurant.photos, key=lambda p: (not p.is_primary, p.id))
    menu = sorted(
        (m for m in restaurant.menu_items if m.is_available),
        key=lambda m: (m.category or "", m.name),
    )

    # Built from column values only; touching relationships here would lazy-load.
    columns = {attr.key: getattr(restaurant, attr.key) for attr in sa_inspect(Restaurant).column_attrs}
    return RestaurantDetail(
        **columns,
        primary_photo=next((p.url for p in photos if p.is_primary), None),
        photos=[PhotoRead.model_validate(p) for p in photos],
        menu=[MenuItemRead.model_validate(m) for m in menu],
        reviews=reviews,
    )


@router.get("/{restaurant_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    restaurant_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ReviewListResponse:
    """Paginated reviews of one restaurant, newest first."""
    await _get_active_restaurant(db, restaurant_id)

    total = await db.scalar(
        select(func.count(Review.id)).where(Review.restaurant_id == restaurant_id)
    ) or 0
    result = await db.execute(
        _reviews_query(restaurant_id).offset((page - 1) * limit).limit(limit)
    )
    return ReviewListResponse(
        data=_review_items(result.all()),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit) if total else 0,
        ),
    )


@router.get("/{restaurant_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    restaurant_id: int,
    date: dt.date = Query(..., description="YYYY-MM-DD"),
    party_size: int = Query(default=2, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> AvailabilityResponse:
    """
    Slots on `date` that fit `party_size` and still have capacity. Each time
    slot is listed once, as its smallest fitting party size.
    """
    await _get_active_restaurant(db, restaurant_id)

    result = await db.execute(
        select(Availability)
        .where(
            Availability.restaurant_id == restaurant_id,
            Availability.date == date,
            Availability.max_party_size >= party_size,
            Availability.available_slots > 0,
        )
        .order_by(Availability.time_slot, Availability.max_party_size)
    )
    slots: dict[str, AvailabilitySlot] = {}
    for row in result.scalars():
        slots.setdefault(row.time_slot, AvailabilitySlot.model_validate(row))
    return AvailabilityResponse(
        restaurant_id=restaurant_id,
        date=date,
        party_size=party_size,
        data=list(slots.values()),
    )
