"""
create_tables.py — idempotent table creation script.
Run this before starting the API for the first time, or after schema changes.
Safe to run multiple times (all DDL uses IF NOT EXISTS).

Usage:
    afritable-create-tables
    python -m afritable.scripts.create_tables
"""

from __future__ import annotations

import asyncio
import logging
import sys

from afritable.config import settings
from afritable.database import open_store

logger = logging.getLogger(__name__)


async def run() -> None:
    """Create all tables."""
    print("Creating tables...")
    async with open_store(create_tables=True):
        pass
    print("  ✓ All tables created (IF NOT EXISTS)")
    print("\nDone. Run `afritable-seed-sample-data` or load real data next.")


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        asyncio.run(run())
    except Exception:
        logger.exception("Table creation failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
