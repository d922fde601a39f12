"""
Availability seeding: populates bookable capacity for the reservation API.

For every restaurant × date × time slot × party size one row is upserted
with a random number of available slots. Capacity is tracked per party
size, so re-running with the same parameters updates rows in place and
never changes the row count. Dates before `today` are never written.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from afritable.models import Availability, Restaurant

logger = logging.getLogger(__name__)

DEFAULT_TIME_SLOTS = (
    "17:00", "17:30", "18:00", "18:30", "19:00", "19:30",
    "20:00", "20:30", "21:00", "21:30", "22:00",
)
DEFAULT_PARTY_SIZES = (2, 4, 6, 8)


@dataclass
class AvailabilityReport:
    restaurants: int = 0
    created: int = 0
    updated: int = 0
    skipped_dates: int = 0

    @property
    def slots_written(self) -> int:
        return self.created + self.updated


def _validate_time_slot(slot: str) -> str:
    hours, _, minutes = slot.partition(":")
    if not (hours.isdigit() and minutes.isdigit() and len(minutes) == 2):
        raise ValueError(f"Invalid time slot '{slot}', expected HH:MM")
    if not (0 <= int(hours) <= 23 and 0 <= int(minutes) <= 59):
        raise ValueError(f"Invalid time slot '{slot}', expected HH:MM")
    return f"{int(hours):02d}:{minutes}"


async def _reservable_restaurant_ids(session: AsyncSession) -> list[int]:
    result = await session.execute(
        select(Restaurant.id)
        .where(Restaurant.is_active.is_(True), Restaurant.accepts_reservations.is_(True))
        .order_by(Restaurant.id)
    )
    return list(result.scalars())


async def seed_availability(
    session_factory: async_sessionmaker[AsyncSession],
    restaurant_ids: Optional[Sequence[int]] = None,
    from_date: Optional[date] = None,
    days: int = 30,
    time_slots: Sequence[str] = DEFAULT_TIME_SLOTS,
    party_sizes: Sequence[int] = DEFAULT_PARTY_SIZES,
    slot_range: tuple[int, int] = (2, 5),
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> AvailabilityReport:
    """
    Upsert availability for dates [from_date, from_date + days).

    restaurant_ids=None selects every active restaurant that accepts
    reservations. `today` and `rng` are injectable for reproducible runs.
    """
    if days < 0:
        raise ValueError("days must not be negative")
    low, high = slot_range
    if low < 0 or high < low:
        raise ValueError(f"Invalid slot range {slot_range}")
    if any(size < 1 for size in party_sizes):
        raise ValueError("party sizes must be positive")

    slots = [_validate_time_slot(s) for s in time_slots]
    sizes = sorted(set(party_sizes))
    today = today or date.today()
    start = from_date or today
    rng = rng or random.Random()

    dates: list[date] = []
    report = AvailabilityReport()
    for offset in range(days):
        day = start + timedelta(days=offset)
        if day < today:
            report.skipped_dates += 1
            continue
        dates.append(day)

    async with session_factory() as session:
        if restaurant_ids is None:
            ids = await _reservable_restaurant_ids(session)
        else:
            ids = list(dict.fromkeys(restaurant_ids))

    logger.info(
        "Seeding availability for %d restaurants, %d dates, %d slots, %d party sizes",
        len(ids), len(dates), len(slots), len(sizes),
    )

    for restaurant_id in ids:
        async with session_factory() as session:
            restaurant = await session.get(Restaurant, restaurant_id)
            if restaurant is None:
                logger.warning("Restaurant %d not found, skipping", restaurant_id)
                continue
            if not restaurant.is_active or not restaurant.accepts_reservations:
                logger.warning("Restaurant %d is not taking reservations, skipping", restaurant_id)
                continue
            report.restaurants += 1

            existing: dict[tuple[date, str, int], Availability] = {}
            if dates:
                result = await session.execute(
                    select(Availability).where(
                        Availability.restaurant_id == restaurant_id,
                        Availability.date >= dates[0],
                        Availability.date <= dates[-1],
                    )
                )
                for row in result.scalars():
                    existing[(row.date, row.time_slot, row.max_party_size)] = row

            for day in dates:
                for slot in slots:
                    for size in sizes:
                        available = rng.randint(low, high)
                        row = existing.get((day, slot, size))
                        if row is None:
                            session.add(
                                Availability(
                                    restaurant_id=restaurant_id,
                                    date=day,
                                    time_slot=slot,
                                    max_party_size=size,
                                    available_slots=available,
                                )
                            )
                            report.created += 1
                        else:
                            row.available_slots = available
                            report.updated += 1

            await session.commit()
        logger.debug("Availability written for restaurant %d", restaurant_id)

    logger.info(
        "Availability seeding complete. Created: %d, Updated: %d, Skipped past dates: %d",
        report.created, report.updated, report.skipped_dates,
    )
    return report
