"""
enrich_photos.py: fetch photos for restaurants that have none (or only placeholders).

Requires GOOGLE_PLACES_API_KEY. Processes one batch per run, picking up after the last restaurant the
previous run handled; schedule it daily to stay inside the provider's quota.

Usage:
    afritable-enrich-photos
    afritable-enrich-photos --batch-size 100 --delay-ms 500
    afritable-enrich-photos --restart            # start again from the lowest id
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from afritable.config import settings
from afritable.database import open_store
from afritable.services.photo_enrichment import EnrichmentReport, enrich_photos
from afritable.services.places_client import PlacesClient, PlacesConfigError

logger = logging.getLogger(__name__)


async def run(
    client: PlacesClient,
    batch_size: int,
    delay_ms: int,
    max_photos: int,
    restart: bool,
) -> EnrichmentReport:
    async with open_store() as session_factory:
        return await enrich_photos(
            session_factory,
            client,
            batch_size=batch_size,
            rate_limit_delay_ms=delay_ms,
            max_photos=max_photos,
            placeholder_markers=settings.placeholder_markers_list,
            photo_max_width=settings.places_photo_max_width,
            restart=restart,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Backfill restaurant photos from Google Places.")
    parser.add_argument("--batch-size", type=int, default=settings.photo_batch_size)
    parser.add_argument("--delay-ms", type=int, default=settings.photo_rate_limit_delay_ms)
    parser.add_argument("--max-photos", type=int, default=settings.photo_max_results)
    parser.add_argument("--restart", action="store_true", help="Ignore the saved checkpoint and start from the lowest id")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Fail before any data is touched
    try:
        client = PlacesClient(
            api_key=settings.google_places_api_key,
            base_url=settings.places_base_url,
            timeout=settings.places_timeout_seconds,
            max_attempts=settings.places_max_attempts,
        )
    except PlacesConfigError as exc:
        logger.error("%s. Set it in the environment or .env", exc)
        return 1

    try:
        report = asyncio.run(run(client, args.batch_size, args.delay_ms, args.max_photos, args.restart))
    except Exception:
        logger.exception("Photo enrichment failed")
        return 1
    finally:
        client.close()

    print(f"Updated : {report.updated}")
    print(f"Skipped : {report.skipped}")
    print(f"Failed  : {report.failed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
