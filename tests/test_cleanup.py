from __future__ import annotations

import json
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from afritable.models import Availability, MenuItem, Photo, Restaurant, Review
from afritable.services import cleanup
from afritable.services.checkpoint import get_checkpoint, save_checkpoint
from afritable.services.cleanup import CLEANUP_JOB, restore_archive, run_cleanup


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def _names(session_factory) -> set[str]:
    async with session_factory() as session:
        return set((await session.execute(select(Restaurant.name))).scalars())


async def _seed(add_restaurant) -> dict[str, int]:
    tomorrow = date.today() + timedelta(days=1)
    return {
        "merkato": await add_restaurant(name="Merkato Ethiopian Cuisine", cuisine=["Ethiopian"]),
        "pizza": await add_restaurant(
            name="Mario's Pizza",
            cuisine=["Italian"],
            photos=[{"url": "https://img.example/mario.jpg", "is_primary": True}],
            menu=[{"name": "Margherita", "price": Decimal("12.50")}],
            availability=[
                {"date": tomorrow, "time_slot": "18:00", "max_party_size": 2, "available_slots": 3}
            ],
            reviews=[{"rating": 4.0, "comment": "Good crust"}],
        ),
        "lagos": await add_restaurant(
            name="Taste of Lagos", cuisine=["Nigerian"], city="Lagos", state="", country="NG"
        ),
        "truck": await add_restaurant(name="Addis Food Truck", cuisine=["Ethiopian"]),
        "island": await add_restaurant(name="Island Pot", cuisine=["Jamaican"], city="Miami", state="FL"),
    }


# ── Dry run ──────────────────────────────────────────────────────────────


async def test_dry_run_reports_without_writing(session_factory, add_restaurant, keywords, tmp_path):
    await _seed(add_restaurant)
    archive_dir = tmp_path / "archive"

    report = await run_cleanup(session_factory, keywords, dry_run=True, archive_dir=archive_dir)

    assert report.dry_run is True
    assert report.scanned == 5
    assert report.kept == 2
    assert report.removed == 3
    assert report.archive_path is None
    assert not archive_dir.exists()
    assert {s.name for s in report.removed_samples} == {"Mario's Pizza", "Taste of Lagos", "Addis Food Truck"}
    assert report.rule_counts["mobile_format"] == 1
    assert report.rule_counts["located_in_africa"] == 1
    assert await _count(session_factory, Restaurant) == 5


# ── Live run ─────────────────────────────────────────────────────────────


async def test_live_run_removes_rejected_restaurants_and_dependents(
    session_factory, add_restaurant, keywords, tmp_path
):
    await _seed(add_restaurant)

    report = await run_cleanup(
        session_factory, keywords, dry_run=False, batch_size=2, archive_dir=tmp_path
    )

    assert report.removed == 3
    assert report.failed == 0
    assert await _names(session_factory) == {"Merkato Ethiopian Cuisine", "Island Pot"}
    for model in (Photo, MenuItem, Availability, Review):
        assert await _count(session_factory, model) == 0


async def test_second_run_removes_nothing(session_factory, add_restaurant, keywords, tmp_path):
    await _seed(add_restaurant)

    first = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path)
    second = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path)

    assert first.removed == 3
    assert second.removed == 0
    assert second.kept == 2
    assert second.archive_path is None


async def test_archive_holds_restaurant_and_dependents(session_factory, add_restaurant, keywords, tmp_path):
    ids = await _seed(add_restaurant)

    report = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path)

    lines = report.archive_path.read_text(encoding="utf-8").splitlines()
    entries = {json.loads(line)["restaurant"]["id"]: json.loads(line) for line in lines}
    assert set(entries) == {ids["pizza"], ids["lagos"], ids["truck"]}

    pizza = entries[ids["pizza"]]
    assert pizza["restaurant"]["name"] == "Mario's Pizza"
    assert pizza["reason"].startswith("non_african_keyword")
    assert pizza["policy_version"] == keywords.version
    assert len(pizza["photos"]) == 1
    assert len(pizza["menu_items"]) == 1
    assert len(pizza["availability"]) == 1
    assert len(pizza["reviews"]) == 1


async def test_restore_brings_back_removed_restaurants(session_factory, add_restaurant, keywords, tmp_path):
    await _seed(add_restaurant)
    report = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path)

    restored = await restore_archive(session_factory, report.archive_path)

    assert restored.restored == 3
    assert restored.skipped == 0
    assert await _count(session_factory, Restaurant) == 5
    assert await _count(session_factory, Photo) == 1
    assert await _count(session_factory, MenuItem) == 1
    assert await _count(session_factory, Availability) == 1
    assert await _count(session_factory, Review) == 1

    async with session_factory() as session:
        item = (await session.execute(select(MenuItem))).scalar_one()
    assert item.price == Decimal("12.50")

    again = await restore_archive(session_factory, report.archive_path)
    assert again.restored == 0
    assert again.skipped == 3


# ── Checkpoint / failures ────────────────────────────────────────────────


async def test_resume_starts_after_checkpoint(session_factory, add_restaurant, keywords, tmp_path):
    ids = await _seed(add_restaurant)
    async with session_factory() as session:
        await save_checkpoint(session, CLEANUP_JOB, ids["pizza"])
        await session.commit()

    report = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path, resume=True)

    assert report.scanned == 3
    assert "Mario's Pizza" in await _names(session_factory)
    async with session_factory() as session:
        assert await get_checkpoint(session, CLEANUP_JOB) is None


async def test_store_error_fails_one_restaurant_only(
    session_factory, add_restaurant, keywords, tmp_path, monkeypatch
):
    ids = await _seed(add_restaurant)
    original = cleanup._remove_restaurant

    async def flaky(factory, restaurant_id, *args, **kwargs):
        if restaurant_id == ids["lagos"]:
            raise OperationalError("DELETE", {}, Exception("database is locked"))
        return await original(factory, restaurant_id, *args, **kwargs)

    monkeypatch.setattr(cleanup, "_remove_restaurant", flaky)

    report = await run_cleanup(session_factory, keywords, dry_run=False, archive_dir=tmp_path)

    assert report.failed == 1
    assert report.removed == 2
    assert await _names(session_factory) == {"Merkato Ethiopian Cuisine", "Island Pot", "Taste of Lagos"}


async def test_samples_are_capped(session_factory, add_restaurant, keywords, tmp_path):
    for i in range(cleanup.SAMPLE_LIMIT + 3):
        await add_restaurant(name=f"Pizza Place {i}", cuisine=["Italian"])

    report = await run_cleanup(session_factory, keywords, dry_run=True, archive_dir=tmp_path)

    assert report.removed == cleanup.SAMPLE_LIMIT + 3
    assert len(report.removed_samples) == cleanup.SAMPLE_LIMIT
    assert report.removed_samples[0].rule == "non_african_keyword"
