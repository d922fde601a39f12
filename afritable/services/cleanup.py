"""
Cleanup — removes restaurants the classifier rejects.

Flow per batch (keyset pagination on restaurants.id):
  1. Classify every restaurant in the batch (content AND location).
  2. Dry run: count and sample only.
  3. Live run: append a JSON snapshot of the restaurant and all dependent
     rows to the run's archive, then delete photos, menu items,
     availability and reviews followed by the restaurant, in one
     transaction per restaurant.
  4. Save the 'cleanup' checkpoint so an interrupted run can resume.

Deletions are recoverable with restore_archive().
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum as PyEnum
from pathlib import Path
from typing import Any, Optional, TextIO

from sqlalchemy import Date, DateTime, Enum, Float, Numeric, Time, delete, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from afritable.models import Availability, MenuItem, Photo, Restaurant, Review
from afritable.services.checkpoint import clear_checkpoint, get_checkpoint, save_checkpoint
from afritable.services.classifier import Decision, classify
from afritable.utils.keywords import KeywordSets

logger = logging.getLogger(__name__)

CLEANUP_JOB = "cleanup"
SAMPLE_LIMIT = 10

# Deleted in this order, before the restaurant itself
_DEPENDENTS: dict[str, Any] = {
    "photos": Photo,
    "menu_items": MenuItem,
    "availability": Availability,
    "reviews": Review,
}


@dataclass
class RemovedSample:
    id: int
    name: str
    rule: str
    matched: Optional[str] = None

    @property
    def reason(self) -> str:
        return f"{self.rule}: {self.matched}" if self.matched else self.rule


@dataclass
class CleanupReport:
    policy_version: str
    dry_run: bool
    scanned: int = 0
    kept: int = 0
    removed: int = 0
    failed: int = 0
    removed_samples: list[RemovedSample] = field(default_factory=list)
    rule_counts: Counter = field(default_factory=Counter)
    archive_path: Optional[Path] = None


@dataclass
class RestoreReport:
    restored: int = 0
    skipped: int = 0


# ── Serialisation helpers ────────────────────────────────────────────────────


def _jsonable(value: Any) -> Any:
    if isinstance(value, PyEnum):
        return value.name
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def row_to_dict(obj: Any) -> dict[str, Any]:
    """Column values of an ORM instance as JSON-safe primitives."""
    mapper = sa_inspect(obj).mapper
    return {attr.key: _jsonable(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def row_from_dict(model: Any, data: dict[str, Any]) -> Any:
    """Inverse of row_to_dict: build an ORM instance of `model`."""
    values: dict[str, Any] = {}
    for attr in sa_inspect(model).column_attrs:
        if attr.key not in data:
            continue
        value = data[attr.key]
        column_type = attr.columns[0].type
        if value is not None:
            if isinstance(column_type, DateTime):
                value = datetime.fromisoformat(value)
            elif isinstance(column_type, Date):
                value = date.fromisoformat(value)
            elif isinstance(column_type, Time):
                value = time.fromisoformat(value)
            elif isinstance(column_type, Enum) and column_type.enum_class is not None:
                value = column_type.enum_class[value]
            elif isinstance(column_type, Numeric) and not isinstance(column_type, Float):
                value = Decimal(str(value))
        values[attr.key] = value
    return model(**values)


def _cuisine_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value or "")


# ── Snapshot / delete ────────────────────────────────────────────────────────


async def _snapshot(session: AsyncSession, restaurant: Restaurant) -> dict[str, Any]:
    snapshot: dict[str, Any] = {"restaurant": row_to_dict(restaurant)}
    for key, model in _DEPENDENTS.items():
        result = await session.execute(
            select(model).where(model.restaurant_id == restaurant.id).order_by(model.id)
        )
        snapshot[key] = [row_to_dict(row) for row in result.scalars()]
    return snapshot


async def _remove_restaurant(
    session_factory: async_sessionmaker[AsyncSession],
    restaurant_id: int,
    decision: Decision,
    archive: TextIO,
    policy_version: str,
) -> bool:
    """Archive and delete one restaurant. Returns False if it had already gone."""
    async with session_factory() as session:
        async with session.begin():
            restaurant = await session.get(Restaurant, restaurant_id)
            if restaurant is None:
                return False

            snapshot = await _snapshot(session, restaurant)
            snapshot["reason"] = decision.reason
            snapshot["policy_version"] = policy_version
            snapshot["removed_at"] = datetime.now(timezone.utc).isoformat()
            archive.write(json.dumps(snapshot) + "\n")
            archive.flush()

            for model in _DEPENDENTS.values():
                await session.execute(delete(model).where(model.restaurant_id == restaurant_id))
            await session.execute(delete(Restaurant).where(Restaurant.id == restaurant_id))
    return True


# ── Main job ─────────────────────────────────────────────────────────────────


async def run_cleanup(
    session_factory: async_sessionmaker[AsyncSession],
    keywords: KeywordSets,
    dry_run: bool = True,
    batch_size: int = 200,
    archive_dir: Path = Path("data/cleanup_archive"),
    resume: bool = False,
) -> CleanupReport:
    """
    Classify every restaurant and remove the rejected ones.

    dry_run defaults to True: nothing is written unless the caller asks.
    A store error on one restaurant rolls back that restaurant only and is
    counted in `failed`; the run continues.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    report = CleanupReport(policy_version=keywords.version, dry_run=dry_run)

    last_id = 0
    if resume and not dry_run:
        async with session_factory() as session:
            last_id = await get_checkpoint(session, CLEANUP_JOB) or 0
        if last_id:
            logger.info("Resuming cleanup after restaurant id %d", last_id)

    archive: Optional[TextIO] = None
    try:
        while True:
            async with session_factory() as session:
                result = await session.execute(
                    select(
                        Restaurant.id,
                        Restaurant.name,
                        Restaurant.description,
                        Restaurant.cuisine,
                        Restaurant.city,
                        Restaurant.state,
                        Restaurant.country,
                    )
                    .where(Restaurant.id > last_id)
                    .order_by(Restaurant.id)
                    .limit(batch_size)
                )
                rows = result.all()

            if not rows:
                break

            for row in rows:
                report.scanned += 1
                decision = classify(
                    row.name,
                    row.description,
                    _cuisine_text(row.cuisine),
                    row.city,
                    row.state,
                    row.country,
                    keywords,
                )
                report.rule_counts[decision.rule.value] += 1

                if decision.keep:
                    report.kept += 1
                    continue

                if dry_run:
                    report.removed += 1
                    _add_sample(report, row.id, row.name, decision)
                    continue

                if archive is None:
                    archive_dir.mkdir(parents=True, exist_ok=True)
                    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
                    report.archive_path = archive_dir / f"cleanup-{stamp}.jsonl"
                    archive = report.archive_path.open("a", encoding="utf-8")

                try:
                    removed = await _remove_restaurant(
                        session_factory, row.id, decision, archive, keywords.version
                    )
                except SQLAlchemyError as exc:
                    logger.error("Failed to remove restaurant %d (%s): %s", row.id, row.name, exc)
                    report.failed += 1
                    continue

                if removed:
                    report.removed += 1
                    _add_sample(report, row.id, row.name, decision)
                    logger.debug("Removed %d %s (%s)", row.id, row.name, decision.reason)

            last_id = rows[-1].id
            if not dry_run:
                async with session_factory() as session:
                    await save_checkpoint(session, CLEANUP_JOB, last_id)
                    await session.commit()
            logger.info(
                "Cleanup progress: scanned %d, kept %d, removed %d, failed %d",
                report.scanned, report.kept, report.removed, report.failed,
            )

        if not dry_run:
            async with session_factory() as session:
                await clear_checkpoint(session, CLEANUP_JOB)
                await session.commit()
    finally:
        if archive is not None:
            archive.close()

    logger.info(
        "Cleanup %s complete (policy v%s). Kept: %d, Removed: %d, Failed: %d",
        "dry run" if dry_run else "run",
        report.policy_version, report.kept, report.removed, report.failed,
    )
    return report


def _add_sample(report: CleanupReport, restaurant_id: int, name: str, decision: Decision) -> None:
    if len(report.removed_samples) < SAMPLE_LIMIT:
        report.removed_samples.append(
            RemovedSample(restaurant_id, name, decision.rule.value, decision.matched)
        )


# ── Restore ──────────────────────────────────────────────────────────────────


async def restore_archive(
    session_factory: async_sessionmaker[AsyncSession],
    archive_path: Path,
) -> RestoreReport:
    """
    Re-insert restaurants (with dependents) from a cleanup archive.

    Entries whose restaurant id is already taken are skipped, so restoring
    the same archive twice is harmless.
    """
    report = RestoreReport()
    with Path(archive_path).open(encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            entry = json.loads(line)
            data = entry["restaurant"]

            async with session_factory() as session:
                async with session.begin():
                    if await session.get(Restaurant, data["id"]) is not None:
                        logger.info("Line %d: restaurant %s already present, skipping", line_no, data["id"])
                        report.skipped += 1
                        continue
                    session.add(row_from_dict(Restaurant, data))
                    await session.flush()
                    for key, model in _DEPENDENTS.items():
                        for child in entry.get(key, []):
                            session.add(row_from_dict(model, child))
            report.restored += 1

    logger.info("Restore complete. Restored: %d, Skipped: %d", report.restored, report.skipped)
    return report
