"""Birthday Event Background Worker

Records a birthday domain event for every subject whose birthday is today.
Safe to run several times a day: a subject already given a birthday event
today is skipped.
"""

import asyncio
import logging
import time
from datetime import date, datetime, time as day_time
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.domain_event_repository import SqlAlchemyDomainEventRepository
from src.adapter.services.subject_directory import SqlSubjectDirectory
from src.adapter.use_case_factory import build_event_triggers
from src.app.use_cases.discounts import BirthdayEventsResultDTO
from src.domain.domain_event import DomainEventKind
from src.domain.eligibility_clock import today

logger = logging.getLogger(__name__)


class BirthdayEventWorker:
    """
    Background worker emitting birthday domain events

    Usage:
        worker = BirthdayEventWorker()
        result = await worker.run_once()

        worker = BirthdayEventWorker()
        await worker.run_forever()
    """

    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("BirthdayEventWorker initialized")

    async def run_once(self, on: Optional[date] = None) -> BirthdayEventsResultDTO:
        """
        Record birthday events for one date

        Args:
            on: Date to run for (defaults to today, UTC)

        Returns:
            BirthdayEventsResultDTO with run summary
        """
        run_date = on or today()

        if not ApplicationConfig.BIRTHDAY_EVENTS_ENABLED:
            logger.info("Birthday events are disabled, skipping")
            return BirthdayEventsResultDTO(
                run_date=run_date,
                birthdays_found=0,
                events_recorded=0,
                already_recorded=0,
                failed=0,
                execution_time_ms=0,
            )

        start_time = time.time()
        start_of_day = datetime.combine(run_date, day_time.min)

        async with self.async_session_factory() as session:
            profiles = await SqlSubjectDirectory(session).list_birthdays(run_date)

        recorded = 0
        skipped = 0
        failed = 0

        for profile in profiles:
            try:
                async with self.async_session_factory() as subject_session:
                    event_repo = SqlAlchemyDomainEventRepository(subject_session)
                    if await event_repo.has_event_since(
                        DomainEventKind.BIRTHDAY, profile.subject_id, start_of_day
                    ):
                        skipped += 1
                        continue

                    triggers = build_event_triggers(subject_session)
                    result = await triggers.on_birthday(profile.subject_id, run_date)

                if result.is_err():
                    logger.error(
                        f"Failed to record birthday event for subject {profile.subject_id}: "
                        f"{result.error.message}"
                    )
                    failed += 1
                    continue

                recorded += 1

            except Exception as e:
                logger.error(f"Unexpected error for subject {profile.subject_id}: {e}")
                failed += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Birthday events for {run_date.isoformat()}: {recorded} recorded, "
            f"{skipped} already recorded, {failed} failed"
        )

        return BirthdayEventsResultDTO(
            run_date=run_date,
            birthdays_found=len(profiles),
            events_recorded=recorded,
            already_recorded=skipped,
            failed=failed,
            execution_time_ms=execution_time_ms,
        )

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run once per calendar date, checking periodically for a date change

        Args:
            check_interval_seconds: Seconds between checks
        """
        interval = check_interval_seconds or ApplicationConfig.BIRTHDAY_EVENTS_CHECK_INTERVAL_SECONDS
        logger.info(f"Starting continuous birthday events with {interval}s check interval")

        last_run_date = None

        while True:
            try:
                current = today()
                if current != last_run_date:
                    await self.run_once(current)
                    last_run_date = current
            except Exception as e:
                logger.error(f"Birthday events cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("BirthdayEventWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.birthday_events --once
        python -m src.worker.birthday_events --date 2024-03-01
        python -m src.worker.birthday_events
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Birthday Event Worker")
    parser.add_argument("--once", action="store_true", help="Run for one date and exit")
    parser.add_argument("--date", type=date.fromisoformat, help="Date to run for (YYYY-MM-DD)")
    args = parser.parse_args()

    worker = BirthdayEventWorker()

    try:
        if args.once or args.date:
            result = await worker.run_once(args.date)
            print(f"Birthday events for {result.run_date.isoformat()}:")
            print(f"  Birthdays: {result.birthdays_found}")
            print(f"  Recorded: {result.events_recorded}")
            print(f"  Already recorded: {result.already_recorded}")
            print(f"  Failed: {result.failed}")
        else:
            await worker.run_forever()
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
