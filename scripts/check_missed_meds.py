#!/usr/bin/env python
"""
Check Missed Medications
One-shot runner for cron or any external scheduler

Usage:
    python scripts/check_missed_meds.py
    python scripts/check_missed_meds.py --at 2024-03-01T10:01:00+05:30
"""

import sys
import os
import argparse
import asyncio
import json
import logging
from datetime import datetime

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from database import init_db
from services.missed_dose_service import AlertJobError, MissedDoseService


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def parse_instant(value: str) -> datetime:
    """argparse type for an ISO-8601 instant with offset"""
    try:
        instant = datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Not an ISO-8601 datetime: {value}") from e
    if instant.tzinfo is None:
        raise argparse.ArgumentTypeError("Datetime must include a UTC offset")
    return instant


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Email caretakers about medications not taken in time"
    )
    parser.add_argument(
        "--at",
        type=parse_instant,
        default=None,
        help="Evaluate as if it were this instant (ISO-8601 with offset)"
    )

    args = parser.parse_args()

    init_db()

    try:
        report = asyncio.run(MissedDoseService().run(now=args.at))
    except AlertJobError as e:
        logger.error(f"Missed medication check failed: {e}")
        print(json.dumps({"error": str(e)}))
        return 1

    print(json.dumps(report.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
