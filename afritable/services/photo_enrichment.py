"""
Photo enrichment: backfills restaurant images from the places provider.

Candidates are active restaurants with no real photo: either no photo rows
at all, or only rows whose URL matches a placeholder marker. For each one:

  1. Use google_place_id, or look it up by "name address city state"
     (a found id is stored on the restaurant).
  2. Fetch up to `max_photos` photo references and resolve each to a URL.
  3. Replace existing photos with the results; the first one is primary.

No results → skipped. Any provider or store error → failed. One
restaurant's failure never stops the batch. A fixed delay between
restaurants keeps the job under the provider's rate limit.

Each run continues after the last restaurant the previous run handled, so
daily runs walk the whole list; `restart=True` goes back to the lowest id.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from sqlalchemy import and_, delete, func, not_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from afritable.models import Photo, Restaurant
from afritable.services.checkpoint import clear_checkpoint, get_checkpoint, save_checkpoint
from afritable.services.places_client import PlacesError

logger = logging.getLogger(__name__)

PHOTO_JOB = "photo_enrichment"


class PhotoProvider(Protocol):
    async def find_place_id(self, query: str) -> Optional[str]: ...

    async def get_photo_references(self, place_id: str, limit: Optional[int] = None) -> list[str]: ...

    async def resolve_photo_url(self, reference: str, max_width: int = 800) -> str: ...


@dataclass
class EnrichmentReport:
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.updated + self.skipped + self.failed


@dataclass
class PhotoStatus:
    total: int
    with_photos: int
    without_photos: int
    without_place_id: int
    days_remaining: int


def _lacks_real_photo(placeholder_markers: Sequence[str]):
    """SQL predicate: restaurant has no photo outside the placeholder set."""
    if not placeholder_markers:
        return ~Restaurant.photos.any()
    is_placeholder = or_(*[Photo.url.ilike(f"%{m}%") for m in placeholder_markers])
    return ~Restaurant.photos.any(not_(is_placeholder))


def _search_query(restaurant: Restaurant) -> str:
    parts = [restaurant.name, restaurant.address, restaurant.city, restaurant.state]
    return " ".join(p.strip() for p in parts if p and p.strip())


async def _store_photos(
    session_factory: async_sessionmaker[AsyncSession],
    restaurant_id: int,
    name: str,
    place_id: str,
    urls: list[str],
) -> None:
    """Replace a restaurant's photos in one transaction; first URL is primary."""
    async with session_factory() as session:
        async with session.begin():
            restaurant = await session.get(Restaurant, restaurant_id)
            if restaurant is None:
                raise LookupError(f"Restaurant {restaurant_id} disappeared")
            restaurant.google_place_id = place_id
            if urls:
                await session.execute(delete(Photo).where(Photo.restaurant_id == restaurant_id))
                for index, url in enumerate(urls):
                    session.add(
                        Photo(
                            restaurant_id=restaurant_id,
                            url=url,
                            caption=f"{name} photo {index + 1}",
                            is_primary=(index == 0),
                        )
                    )


async def enrich_photos(
    session_factory: async_sessionmaker[AsyncSession],
    client: PhotoProvider,
    batch_size: int = 20,
    rate_limit_delay_ms: int = 1000,
    max_photos: int = 3,
    placeholder_markers: Sequence[str] = (),
    photo_max_width: int = 800,
    restart: bool = False,
) -> EnrichmentReport:
    """Process one batch of restaurants lacking photos."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    if max_photos < 1:
        raise ValueError("max_photos must be at least 1")

    report = EnrichmentReport()

    async with session_factory() as session:
        after_id = 0 if restart else (await get_checkpoint(session, PHOTO_JOB) or 0)
        result = await session.execute(
            select(Restaurant)
            .where(
                Restaurant.is_active.is_(True),
                Restaurant.id > after_id,
                _lacks_real_photo(placeholder_markers),
            )
            .order_by(Restaurant.id)
            .limit(batch_size)
        )
        candidates = list(result.scalars())

    logger.info("Found %d restaurants needing photos (after id %d)", len(candidates), after_id)

    for index, restaurant in enumerate(candidates):
        if index and rate_limit_delay_ms > 0:
            await asyncio.sleep(rate_limit_delay_ms / 1000)

        try:
            place_id = restaurant.google_place_id
            if not place_id:
                place_id = await client.find_place_id(_search_query(restaurant))
            if not place_id:
                logger.info("No place found for %s (%d)", restaurant.name, restaurant.id)
                report.skipped += 1
            else:
                refs = await client.get_photo_references(place_id, limit=max_photos)
                urls = [await client.resolve_photo_url(ref, photo_max_width) for ref in refs[:max_photos]]
                await _store_photos(session_factory, restaurant.id, restaurant.name, place_id, urls)
                if urls:
                    report.updated += 1
                    logger.info("Added %d photos to %s (%d)", len(urls), restaurant.name, restaurant.id)
                else:
                    report.skipped += 1
                    logger.info("No photos found for %s (%d)", restaurant.name, restaurant.id)
        except PlacesError as exc:
            logger.warning("Photo provider failed for %s (%d): %s", restaurant.name, restaurant.id, exc)
            report.failed += 1
        except (SQLAlchemyError, LookupError) as exc:
            logger.error("Could not store photos for %s (%d): %s", restaurant.name, restaurant.id, exc)
            report.failed += 1

        async with session_factory() as session:
            await save_checkpoint(session, PHOTO_JOB, restaurant.id)
            await session.commit()

    if len(candidates) < batch_size:
        # Reached the end of the candidate list; next run starts over.
        async with session_factory() as session:
            await clear_checkpoint(session, PHOTO_JOB)
            await session.commit()

    logger.info(
        "Photo enrichment complete. Updated: %d, Skipped: %d, Failed: %d",
        report.updated, report.skipped, report.failed,
    )
    return report


async def photo_status(
    session_factory: async_sessionmaker[AsyncSession],
    daily_limit: int = 100,
    placeholder_markers: Sequence[str] = (),
) -> PhotoStatus:
    """Summarise photo coverage and the days left at `daily_limit` per day."""
    async with session_factory() as session:
        total = await session.scalar(select(func.count(Restaurant.id))) or 0
        without = await session.scalar(
            select(func.count(Restaurant.id)).where(_lacks_real_photo(placeholder_markers))
        ) or 0
        without_place_id = await session.scalar(
            select(func.count(Restaurant.id)).where(
                and_(_lacks_real_photo(placeholder_markers), Restaurant.google_place_id.is_(None))
            )
        ) or 0

    return PhotoStatus(
        total=total,
        with_photos=total - without,
        without_photos=without,
        without_place_id=without_place_id,
        days_remaining=math.ceil(without / daily_limit) if daily_limit > 0 else 0,
    )
