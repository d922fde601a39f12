"""
photo_status.py — report how many restaurants still need photos.

Usage:
    afritable-photo-status
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date, timedelta

from afritable.config import settings
from afritable.database import open_store
from afritable.services.photo_enrichment import PhotoStatus, photo_status

logger = logging.getLogger(__name__)


async def run() -> PhotoStatus:
    async with open_store() as session_factory:
        return await photo_status(
            session_factory,
            daily_limit=settings.photo_daily_limit,
            placeholder_markers=settings.placeholder_markers_list,
        )


def _pct(part: int, total: int) -> str:
    return f"{part / total * 100:.1f}%" if total else "0.0%"


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        status = asyncio.run(run())
    except Exception:
        logger.exception("Photo status check failed")
        return 1

    print("Photo status")
    print(f"  Total restaurants : {status.total}")
    print(f"  With photos       : {status.with_photos} ({_pct(status.with_photos, status.total)})")
    print(f"  Without photos    : {status.without_photos} ({_pct(status.without_photos, status.total)})")
    print(f"  ...without place id: {status.without_place_id}")
    if status.without_photos:
        finish = date.today() + timedelta(days=status.days_remaining)
        print(
            f"  At {settings.photo_daily_limit}/day: {status.days_remaining} days "
            f"(around {finish.isoformat()})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
