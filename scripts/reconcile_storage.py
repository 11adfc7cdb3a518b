#!/usr/bin/env python3
"""
CLI utility to check blob/metadata consistency and sweep orphaned blobs.

Usage:
    python scripts/reconcile_storage.py
    python scripts/reconcile_storage.py --sweep --grace-minutes 120
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.documents.factory import get_storage_reconciler
from docvault_core.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Reconcile document blobs and records")
    parser.add_argument(
        "--sweep",
        action="store_true",
        help="Delete orphaned blobs (records are never deleted)",
    )
    parser.add_argument(
        "--grace-minutes",
        type=int,
        default=None,
        help="Ignore blobs newer than this (defaults to settings.ORPHAN_GRACE_MINUTES)",
    )
    args = parser.parse_args()

    setup_logging()
    grace = timedelta(minutes=args.grace_minutes) if args.grace_minutes is not None else None
    reconciler = get_storage_reconciler(grace=grace)

    report = reconciler.sweep() if args.sweep else reconciler.scan()
    print(report.model_dump_json(indent=2))

    # Non-zero exit lets cron/monitoring flag dangling records
    return 1 if report.dangling_records else 0


if __name__ == "__main__":
    sys.exit(main())
