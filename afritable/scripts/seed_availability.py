"""
seed_availability.py — generate bookable time slots for the reservation API.

Usage:
    afritable-seed-availability                       # next AVAILABILITY_DAYS days
    afritable-seed-availability --days 14 --from-date 2026-11-01
    afritable-seed-availability --restaurant-id 12 --restaurant-id 40
    afritable-seed-availability --seed 42             # reproducible capacities
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from datetime import date
from typing import Optional, Sequence

from afritable.config import settings
from afritable.database import open_store
from afritable.services.availability import AvailabilityReport, seed_availability

logger = logging.getLogger(__name__)


async def run(
    days: int,
    from_date: Optional[date],
    restaurant_ids: Optional[list[int]],
    seed: Optional[int],
) -> AvailabilityReport:
    async with open_store() as session_factory:
        return await seed_availability(
            session_factory,
            restaurant_ids=restaurant_ids,
            from_date=from_date,
            days=days,
            time_slots=settings.time_slots_list,
            party_sizes=settings.party_sizes_list,
            slot_range=(settings.availability_min_slots, settings.availability_max_slots),
            rng=random.Random(seed),
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed restaurant availability slots.")
    parser.add_argument("--days", type=int, default=settings.availability_days)
    parser.add_argument("--from-date", type=date.fromisoformat, default=None, help="YYYY-MM-DD, default today")
    parser.add_argument(
        "--restaurant-id", type=int, action="append", dest="restaurant_ids",
        help="Limit to these restaurants (repeatable)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for capacities")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        report = asyncio.run(run(args.days, args.from_date, args.restaurant_ids, args.seed))
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:
        logger.exception("Availability seeding failed")
        return 1

    print(f"Restaurants : {report.restaurants}")
    print(f"Created     : {report.created}")
    print(f"Updated     : {report.updated}")
    if report.skipped_dates:
        print(f"Past dates skipped: {report.skipped_dates}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
