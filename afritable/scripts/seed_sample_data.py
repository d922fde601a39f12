"""
seed_sample_data.py — load a handful of demo restaurants for local development.

Restaurants get placeholder photos (which photo enrichment later replaces),
a short menu and opening hours. Rows whose name already exists are left
alone, so the script can be re-run safely.

Usage:
    afritable-seed-sample-data
"""

from __future__ import annotations

import asyncio
import logging
import sys
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from afritable.config import settings
from afritable.database import open_store
from afritable.models import MenuItem, Photo, PriceRange, Restaurant

logger = logging.getLogger(__name__)

_EVENING_HOURS = {
    "monday": "11:00-22:00",
    "tuesday": "11:00-22:00",
    "wednesday": "11:00-22:00",
    "thursday": "11:00-22:00",
    "friday": "11:00-23:00",
    "saturday": "10:00-23:00",
    "sunday": "12:00-21:00",
}

SAMPLE_RESTAURANTS: list[dict[str, Any]] = [
    {
        "name": "Merkato Ethiopian Cuisine",
        "description": "Injera platters, doro wat and a weekend coffee ceremony.",
        "cuisine": ["Ethiopian", "African"],
        "address": "2410 Richmond Ave",
        "city": "Houston",
        "state": "TX",
        "zip_code": "77098",
        "phone": "(713) 555-0123",
        "price_range": PriceRange.MODERATE,
        "rating": 4.6,
        "review_count": 212,
        "has_takeout": True,
        "menu": [
            ("Doro Wat", "Chicken stew in berbere sauce with boiled egg", "16.50", "Mains"),
            ("Veggie Combo", "Misir, gomen, shiro and atakilt on injera", "14.00", "Mains"),
            ("Sambusa", "Lentil-filled pastry, two pieces", "5.00", "Appetizers"),
        ],
    },
    {
        "name": "Suya Spot Kitchen",
        "description": "Nigerian grill: suya skewers, jollof rice and pepper soup.",
        "cuisine": ["Nigerian", "West African"],
        "address": "9200 Bellaire Blvd",
        "city": "Houston",
        "state": "TX",
        "zip_code": "77036",
        "phone": "(713) 555-0456",
        "price_range": PriceRange.BUDGET,
        "rating": 4.4,
        "review_count": 138,
        "has_delivery": True,
        "has_takeout": True,
        "menu": [
            ("Beef Suya", "Spiced grilled beef with onions and yaji", "12.00", "Mains"),
            ("Jollof Rice", "Smoky party jollof with fried plantain", "11.00", "Mains"),
            ("Puff Puff", "Fried dough balls", "4.50", "Desserts"),
        ],
    },
    {
        "name": "Island Pot",
        "description": "Jamaican jerk chicken, oxtail and curry goat.",
        "cuisine": ["Jamaican", "Caribbean"],
        "address": "5110 W Fuqua St",
        "city": "Houston",
        "state": "TX",
        "zip_code": "77045",
        "phone": "(713) 555-0789",
        "price_range": PriceRange.MODERATE,
        "rating": 4.3,
        "review_count": 95,
        "has_outdoor_seating": True,
        "menu": [
            ("Jerk Chicken", "Half chicken, rice and peas, cabbage", "15.00", "Mains"),
            ("Oxtail", "Braised oxtail with butter beans", "19.00", "Mains"),
            ("Beef Patty", "Flaky pastry with spiced beef", "3.50", "Appetizers"),
        ],
    },
    {
        "name": "Dar Tagine",
        "description": "Moroccan tagines, couscous and mint tea.",
        "cuisine": ["Moroccan", "North African"],
        "address": "1800 Post Oak Blvd",
        "city": "Houston",
        "state": "TX",
        "zip_code": "77056",
        "phone": "(713) 555-0654",
        "price_range": PriceRange.EXPENSIVE,
        "rating": 4.7,
        "review_count": 61,
        "has_parking": True,
        "is_wheelchair_accessible": True,
        "menu": [
            ("Lamb Tagine", "Lamb with prunes and almonds", "26.00", "Mains"),
            ("Chicken Pastilla", "Sweet and savoury filo pie", "18.00", "Appetizers"),
        ],
    },
    {
        "name": "Kilimanjaro Grill",
        "description": "East African nyama choma and pilau.",
        "cuisine": ["Kenyan", "East African"],
        "address": "7600 Westheimer Rd",
        "city": "Houston",
        "state": "TX",
        "zip_code": "77063",
        "phone": "(713) 555-0321",
        "price_range": PriceRange.MODERATE,
        "rating": 4.2,
        "review_count": 44,
        "has_wifi": True,
        "menu": [
            ("Nyama Choma", "Grilled goat with kachumbari", "18.00", "Mains"),
            ("Pilau", "Spiced rice with beef", "13.00", "Mains"),
        ],
    },
]

PLACEHOLDER_PHOTOS = [
    "https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=400&h=300&fit=crop",
    "https://images.unsplash.com/photo-1565299624946-b28f40a0ca4b?w=400&h=300&fit=crop",
    "https://images.unsplash.com/photo-1567620905732-2d1ec7ab7445?w=400&h=300&fit=crop",
]


def _build_restaurant(data: dict[str, Any], index: int) -> Restaurant:
    fields = {k: v for k, v in data.items() if k != "menu"}
    restaurant = Restaurant(
        country="US",
        hours=_EVENING_HOURS,
        accepts_reservations=True,
        is_active=True,
        **fields,
    )
    restaurant.photos = [
        Photo(
            url=PLACEHOLDER_PHOTOS[index % len(PLACEHOLDER_PHOTOS)],
            caption=f"{data['name']} placeholder",
            is_primary=True,
        )
    ]
    restaurant.menu_items = [
        MenuItem(name=name, description=desc, price=Decimal(price), category=category)
        for name, desc, price, category in data["menu"]
    ]
    return restaurant


async def run() -> tuple[int, int]:
    """Insert missing sample restaurants. Returns (inserted, skipped)."""
    inserted = skipped = 0
    async with open_store(create_tables=True) as session_factory:
        async with session_factory() as session:
            names = [r["name"] for r in SAMPLE_RESTAURANTS]
            result = await session.execute(select(Restaurant.name).where(Restaurant.name.in_(names)))
            existing = set(result.scalars())

            for index, data in enumerate(SAMPLE_RESTAURANTS):
                if data["name"] in existing:
                    logger.info("Sample restaurant '%s' already present, skipping", data["name"])
                    skipped += 1
                    continue
                session.add(_build_restaurant(data, index))
                inserted += 1

            await session.commit()
    return inserted, skipped


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        inserted, skipped = asyncio.run(run())
    except Exception:
        logger.exception("Sample data seeding failed")
        return 1

    print(f"  ✓ Inserted {inserted} sample restaurants ({skipped} already present)")
    print("\nNext: afritable-seed-availability, then afritable-enrich-photos.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
