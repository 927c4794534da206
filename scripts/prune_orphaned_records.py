#!/usr/bin/env python3
"""
Prune Orphaned Metadata Records

Scans the video_<epoch-millis> records in the config store and removes the
ones whose video file no longer exists. The retention sweep deletes files
only, so records for swept videos accumulate until pruned.

Usage:
    python scripts/prune_orphaned_records.py          # Dry run
    python scripts/prune_orphaned_records.py --apply  # Actually remove
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from storage import MetadataManager, create_config_store, create_filesystem

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def prune_orphaned_records(dry_run: bool = True, store_path=None) -> dict:
    """
    Find and optionally remove orphaned metadata records.

    Args:
        dry_run: If True, only report what would be removed
        store_path: Config store file (None = CONFIG_STORE_PATH)

    Returns:
        Statistics dict with counts
    """
    logger.info("Starting orphaned record pruning...")
    logger.info(f"Mode: {'DRY RUN (no changes)' if dry_run else 'APPLY (will remove)'}")

    metadata = MetadataManager(create_config_store(path=store_path))
    filesystem = create_filesystem()

    records = metadata.list_records()
    logger.info(f"Found {len(records)} metadata records")

    orphaned = metadata.find_orphaned(filesystem.exists)
    for key in orphaned:
        record = metadata.get(key)
        logger.warning(f"Orphaned record: {key} (path: {record.path if record else '?'})")

    removed = 0
    if orphaned and not dry_run:
        metadata.remove(orphaned)
        removed = len(orphaned)

    stats = {
        "total_records": len(records),
        "existing_files": len(records) - len(orphaned),
        "orphaned_records": len(orphaned),
        "removed_records": removed,
        "dry_run": dry_run,
    }

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total records:        {stats['total_records']}")
    logger.info(f"Existing files:       {stats['existing_files']}")
    logger.info(f"Orphaned records:     {stats['orphaned_records']}")
    if dry_run:
        logger.info(
            f"Would remove:         {stats['orphaned_records']} (use --apply to remove)",
        )
    else:
        logger.info(f"Removed records:      {stats['removed_records']}")
    logger.info("=" * 60)

    return stats


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Remove metadata records for deleted video files",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Actually remove orphaned records (default is dry run)",
    )
    parser.add_argument("--store", type=Path, help="Config store YAML file")
    args = parser.parse_args()

    try:
        stats = prune_orphaned_records(dry_run=not args.apply, store_path=args.store)

        if stats["orphaned_records"] > 0 and not args.apply:
            logger.info("Run with --apply to actually remove these records")
        elif stats["orphaned_records"] == 0:
            logger.info("No orphaned records found")

    except Exception as e:
        logger.error(f"Pruning failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
