"""RecordDomainEvent Use Case

Appends a domain event to the ledger. Rule matching happens later, in
ProcessDomainEvent.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.domain_event_repository import DomainEventRepository
from src.app.services.subject_directory import SubjectDirectory
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import SUBJECT_NOT_FOUND, failure
from src.domain.domain_event import DomainEvent
from .dtos import DomainEventResponseDTO, RecordDomainEventCommandDTO

logger = logging.getLogger(__name__)


class RecordDomainEvent:
    """
    Use Case: Record a domain event

    Business Rules:
    1. The subject must exist
    2. Events are append-only; processed_at starts unset

    Flow:
    1. Check the subject exists
    2. Append the event
    3. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        event_repo: DomainEventRepository,
        subject_directory: SubjectDirectory,
    ):
        self.uow = uow
        self.event_repo = event_repo
        self.subject_directory = subject_directory

    async def execute(self, command: RecordDomainEventCommandDTO) -> Result[DomainEventResponseDTO]:
        try:
            # Step 1: Subject must exist
            profile = await self.subject_directory.get_profile(command.subject_id)
            if profile is None:
                return Return.err(
                    Error(
                        code=SUBJECT_NOT_FOUND,
                        message=f"Subject {command.subject_id} not found",
                    )
                )

            # Step 2: Append
            event = await self.event_repo.create(
                DomainEvent(
                    kind=command.kind,
                    subject_id=command.subject_id,
                    context_id=command.context_id,
                    payload=command.payload,
                )
            )
            response = DomainEventResponseDTO.from_entity(event)

            # Step 3: Commit
            await self.uow.commit()

            logger.info(
                f"Recorded domain event {response.event_id} "
                f"({response.kind}) for subject {response.subject_id}"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(failure("RECORD_DOMAIN_EVENT_FAILED", "Failed to record domain event", e))
