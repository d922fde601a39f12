from __future__ import annotations

from typing import Any

import pytest

from afritable.database import open_store
from afritable.models import Availability, MenuItem, Photo, Restaurant, Review, User
from afritable.utils.keywords import load_keyword_sets


@pytest.fixture(scope="session")
def keywords():
    return load_keyword_sets()


@pytest.fixture
async def session_factory(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'afritable-test.db'}"
    async with open_store(url, create_tables=True) as factory:
        yield factory


@pytest.fixture
def add_restaurant(session_factory):
    """
    Insert a restaurant (defaults to a US listing) and return its id.

    Dependents can be passed as lists of column dicts:
    photos=[{"url": ...}], menu=[{"name": ...}], availability=[...], reviews=[...].
    """

    async def _add(**fields: Any) -> int:
        photos = fields.pop("photos", [])
        menu = fields.pop("menu", [])
        availability = fields.pop("availability", [])
        reviews = fields.pop("reviews", [])
        values: dict[str, Any] = {
            "name": "Test Restaurant",
            "cuisine": [],
            "city": "Houston",
            "state": "TX",
            "country": "US",
        }
        values.update(fields)

        async with session_factory() as session:
            restaurant = Restaurant(**values)
            restaurant.photos = [Photo(**p) for p in photos]
            restaurant.menu_items = [MenuItem(**m) for m in menu]
            restaurant.availability = [Availability(**a) for a in availability]
            if reviews:
                user = User(email=f"reviewer-{values['name']}@example.com", password_hash="x")
                session.add(user)
                await session.flush()
                restaurant.reviews = [Review(user_id=user.id, **r) for r in reviews]
            session.add(restaurant)
            await session.commit()
            return restaurant.id

    return _add
