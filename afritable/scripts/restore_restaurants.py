"""
restore_restaurants.py — undo a cleanup run from its archive file.

Usage:
    afritable-restore data/cleanup_archive/cleanup-20261019T070000.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from afritable.config import settings
from afritable.database import open_store
from afritable.services.cleanup import RestoreReport, restore_archive

logger = logging.getLogger(__name__)


async def run(archive: Path) -> RestoreReport:
    async with open_store() as session_factory:
        return await restore_archive(session_factory, archive)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Restore restaurants removed by cleanup.")
    parser.add_argument("archive", type=Path, help="Path to a cleanup-*.jsonl archive")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.archive.is_file():
        logger.error("Archive not found: %s", args.archive)
        return 1

    try:
        report = asyncio.run(run(args.archive))
    except Exception:
        logger.exception("Restore failed")
        return 1

    print(f"Restored: {report.restored}  Skipped (already present): {report.skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
