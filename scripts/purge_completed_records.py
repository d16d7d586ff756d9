#!/usr/bin/env python3
"""
Deletes completed orders older than a retention window. Each deletion is
written to the audit log like any other delete.

Usage:
    python scripts/purge_completed_records.py --days 30 [--dry-run]
"""
import sys
import os
import argparse
import asyncio
import logging
from datetime import timedelta

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(__file__), '../backend'))

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '../.env'))

from waiterboard.db.database import AsyncSessionLocal
from waiterboard.repositories.waiter_record import WaiterRecordRepository
from waiterboard.services.waiter_record_service import WaiterRecordService
from waiterboard.utils.time_utils import utcnow

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(message)s')
logger = logging.getLogger(__name__)


async def purge(session, days: int, dry_run: bool) -> int:
    cutoff = utcnow() - timedelta(days=days)
    logger.info(f"Purging completed records finished before {cutoff.isoformat()}...")

    records = await WaiterRecordRepository(session).get_completed_before(cutoff)
    if dry_run:
        logger.info(f"[DRY RUN] Would delete {len(records)} records")
        return len(records)

    service = WaiterRecordService(session)
    for record in records:
        await service.delete_record(record.id)
    await session.commit()
    logger.info(f"Deleted {len(records)} records")
    return len(records)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--days', type=int, default=30, help='Keep completed records for this many days (default: 30)')
    parser.add_argument('--dry-run', action='store_true', help='Only report what would be deleted')
    args = parser.parse_args()

    if args.days < 1:
        parser.error("--days must be at least 1")

    async def run():
        async with AsyncSessionLocal() as session:
            await purge(session, args.days, args.dry_run)

    asyncio.run(run())


if __name__ == "__main__":
    main()
