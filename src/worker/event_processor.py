"""Domain Event Processor Background Worker

Drains unprocessed domain events through ProcessDomainEvent. Because an event
stays unprocessed until every matched rule was handled, this worker is also
the retry path for events whose processing failed.
"""

import asyncio
import logging
import time
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.domain_event_repository import SqlAlchemyDomainEventRepository
from src.adapter.services.notification_service import create_notification_service
from src.adapter.use_case_factory import build_process_domain_event
from src.app.services.notification_service import NotificationService
from src.app.use_cases.discounts import EventProcessingResultDTO, ProcessDomainEventCommandDTO

logger = logging.getLogger(__name__)


class DomainEventProcessorWorker:
    """
    Background worker for automated discount issuance

    Features:
    - Processes the oldest unprocessed events first, in batches
    - One session per event so a failure never leaks into the next event
    - Idempotent: an event processed elsewhere is reported and skipped

    Usage:
        worker = DomainEventProcessorWorker()
        result = await worker.run_once()

        worker = DomainEventProcessorWorker()
        await worker.run_forever(interval_seconds=30)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        batch_size: Optional[int] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            batch_size: Events per run (defaults to EVENT_PROCESSING_BATCH_SIZE)
            notification_service: Defaults to logging plus the configured webhook
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.batch_size = batch_size or ApplicationConfig.EVENT_PROCESSING_BATCH_SIZE
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.DISCOUNT_NOTIFICATION_WEBHOOK
        )

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("DomainEventProcessorWorker initialized")

    async def run_once(self) -> EventProcessingResultDTO:
        """
        Process one batch of unprocessed events

        Returns:
            EventProcessingResultDTO with batch summary
        """
        if not ApplicationConfig.EVENT_PROCESSING_ENABLED:
            logger.info("Domain event processing is disabled, skipping")
            return EventProcessingResultDTO(
                total_events=0, processed=0, failed=0, codes_issued=0, execution_time_ms=0
            )

        start_time = time.time()

        async with self.async_session_factory() as session:
            event_repo = SqlAlchemyDomainEventRepository(session)
            event_ids = [event.id for event in await event_repo.list_unprocessed(limit=self.batch_size)]

        processed = 0
        failed = 0
        codes_issued = 0

        for event_id in event_ids:
            try:
                async with self.async_session_factory() as event_session:
                    use_case = build_process_domain_event(event_session, self.notification_service)
                    result = await use_case.execute(ProcessDomainEventCommandDTO(event_id=event_id))

                if result.is_err():
                    logger.error(f"Failed to process domain event {event_id}: {result.error.message}")
                    failed += 1
                    continue

                processed += 1
                codes_issued += sum(len(outcome.codes) for outcome in result.value.issued)

            except Exception as e:
                logger.error(f"Unexpected error processing domain event {event_id}: {e}")
                failed += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Domain event batch complete: {processed}/{len(event_ids)} processed, "
            f"{failed} failed, {codes_issued} codes issued, {execution_time_ms}ms"
        )

        return EventProcessingResultDTO(
            total_events=len(event_ids),
            processed=processed,
            failed=failed,
            codes_issued=codes_issued,
            execution_time_ms=execution_time_ms,
        )

    async def run_forever(self, interval_seconds: Optional[int] = None):
        """
        Process batches continuously

        Args:
            interval_seconds: Pause between batches (defaults to EVENT_PROCESSING_INTERVAL_SECONDS)
        """
        interval = interval_seconds or ApplicationConfig.EVENT_PROCESSING_INTERVAL_SECONDS
        logger.info(f"Starting continuous domain event processing with {interval}s interval")

        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Domain event processing cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("DomainEventProcessorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.event_processor --once
        python -m src.worker.event_processor
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Domain Event Processor Worker")
    parser.add_argument("--once", action="store_true", help="Process one batch and exit")
    parser.add_argument("--batch-size", type=int, help="Events per batch")
    args = parser.parse_args()

    worker = DomainEventProcessorWorker(batch_size=args.batch_size)

    try:
        if args.once:
            result = await worker.run_once()
            print("Domain event processing complete:")
            print(f"  Events: {result.total_events}")
            print(f"  Processed: {result.processed}")
            print(f"  Failed: {result.failed}")
            print(f"  Codes issued: {result.codes_issued}")
        else:
            await worker.run_forever()
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
