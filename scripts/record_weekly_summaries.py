"""Record a weekly summary for every user with goals in the past week.

Meant to be triggered by an external scheduler (cron, Cloud Scheduler).

Usage:
    python scripts/record_weekly_summaries.py
    python scripts/record_weekly_summaries.py --date 2026-10-17
"""
import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from goal_tracker.config import settings
from goal_tracker.database import database
from goal_tracker.services.weekly_report_service import WeeklyReportService


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Record weekly summaries for all users")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Last day of the week (YYYY-MM-DD), defaults to today",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level)

    backend = await database.connect()
    if not backend.durable:
        print("Warning: Google Sheets not configured, summaries will not be persisted")

    service = WeeklyReportService(backend)
    summaries = await service.record_all(reference=args.date)

    print(f"Recorded {len(summaries)} weekly summaries")


if __name__ == "__main__":
    asyncio.run(main())
