"""
cleanup_restaurants.py — remove restaurants outside the directory's scope.

Keeps only African and Caribbean restaurants located in the US. Rejected
restaurants are archived to CLEANUP_ARCHIVE_DIR before deletion and can be
brought back with `afritable-restore`.

Usage:
    afritable-cleanup --dry-run                  # report only, no writes
    afritable-cleanup                            # archive + delete
    afritable-cleanup --resume                   # continue an interrupted run
    afritable-cleanup --keywords my_policy.json  # alternative keyword policy
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
from afritable.services.cleanup import CleanupReport, run_cleanup
from afritable.utils.keywords import KeywordConfigError, load_keyword_sets

logger = logging.getLogger(__name__)


def _print_report(report: CleanupReport) -> None:
    mode = "DRY RUN" if report.dry_run else "CLEANUP"
    print(f"\n{mode} summary (policy v{report.policy_version})")
    print(f"  Scanned : {report.scanned}")
    print(f"  Kept    : {report.kept}")
    print(f"  {'Would remove' if report.dry_run else 'Removed'} : {report.removed}")
    if report.failed:
        print(f"  Failed  : {report.failed}")
    if report.rule_counts:
        print("  By rule :")
        for rule, count in report.rule_counts.most_common():
            print(f"    {rule:<22} {count}")
    if report.removed_samples:
        print("  Sample:")
        for i, sample in enumerate(report.removed_samples, start=1):
            print(f"    {i}. {sample.name} (#{sample.id}): {sample.reason}")
        extra = report.removed - len(report.removed_samples)
        if extra > 0:
            print(f"    ... and {extra} more")
    if report.archive_path:
        print(f"  Archive : {report.archive_path}")


async def run(
    dry_run: bool,
    batch_size: int,
    resume: bool,
    keywords_path: Optional[Path],
    archive_dir: Path,
) -> CleanupReport:
    keywords = load_keyword_sets(keywords_path)
    async with open_store() as session_factory:
        return await run_cleanup(
            session_factory,
            keywords,
            dry_run=dry_run,
            batch_size=batch_size,
            archive_dir=archive_dir,
            resume=resume,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Remove restaurants that fail the directory policy.")
    parser.add_argument("--dry-run", action="store_true", help="Report only, no DB writes")
    parser.add_argument("--batch-size", type=int, default=settings.cleanup_batch_size)
    parser.add_argument("--resume", action="store_true", help="Continue after the saved checkpoint")
    parser.add_argument(
        "--keywords",
        type=Path,
        default=settings.classification_keywords_path,
        help="Keyword policy JSON (defaults to the packaged policy)",
    )
    parser.add_argument("--archive-dir", type=Path, default=settings.cleanup_archive_dir)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        report = asyncio.run(
            run(
                dry_run=args.dry_run,
                batch_size=args.batch_size,
                resume=args.resume,
                keywords_path=args.keywords,
                archive_dir=args.archive_dir,
            )
        )
    except KeywordConfigError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:
        logger.exception("Cleanup failed")
        return 1

    _print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
