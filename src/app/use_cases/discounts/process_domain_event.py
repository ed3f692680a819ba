"""ProcessDomainEvent Use Case

Matches one recorded domain event against the automation rules, issues codes,
and marks the event processed. Safe to call any number of times for the same
event.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.repositories.domain_event_repository import DomainEventRepository
from src.app.services.notification_service import DiscountIssuedNotice, NotificationService
from src.app.services.subject_directory import SubjectDirectory
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import DOMAIN_EVENT_NOT_FOUND, failure
from src.domain.base import utc_now
from .discount_issuer import DiscountIssuer
from .dtos import IssuanceOutcome, ProcessDomainEventCommandDTO, ProcessDomainEventResponseDTO, RuleOutcomeDTO
from .rule_matcher import AutomationRuleMatcher, EventSnapshot, MatchedRule

logger = logging.getLogger(__name__)


class ProcessDomainEvent:
    """
    Use Case: Process a domain event

    Business Rules:
    1. An event whose processed_at is set is never re-evaluated
    2. Each matched rule issues in its own transaction; a conflict on one
       rule does not undo another
    3. processed_at is set only after every matched rule was handled, so a
       failure midway leaves the event for the retry worker
    4. Notifications are sent after commit, one per issued code; delivery
       failures are logged and never roll back issuance

    Flow:
    1. Load the event (idempotency check)
    2. Match rules
    3. Resolve the subject's family
    4. Issue per rule
    5. Mark processed and commit
    6. Notify
    """

    def __init__(
        self,
        uow: UnitOfWork,
        event_repo: DomainEventRepository,
        matcher: AutomationRuleMatcher,
        issuer: DiscountIssuer,
        subject_directory: SubjectDirectory,
        notification_service: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.event_repo = event_repo
        self.matcher = matcher
        self.issuer = issuer
        self.subject_directory = subject_directory
        self.notification_service = notification_service
        self.clock = clock

    async def execute(self, command: ProcessDomainEventCommandDTO) -> Result[ProcessDomainEventResponseDTO]:
        try:
            # Step 1: Load event
            event = await self.event_repo.get_by_id(command.event_id)
            if event is None:
                return Return.err(
                    Error(
                        code=DOMAIN_EVENT_NOT_FOUND,
                        message=f"Domain event {command.event_id} not found",
                    )
                )
            if event.processed_at is not None:
                return Return.ok(
                    ProcessDomainEventResponseDTO(event_id=event.id, already_processed=True)
                )
            snapshot = EventSnapshot.from_entity(event)
            now = self.clock()

            # Step 2: Match rules
            matches = await self.matcher.match(snapshot, now)

            # Step 3: Family of the subject, for per-family codes and notices
            family_id = None
            if matches:
                profile = await self.subject_directory.get_profile(snapshot.subject_id)
                family_id = profile.family_id if profile else None

            # Step 4: Issue, one transaction per rule
            issued: list[tuple[MatchedRule, RuleOutcomeDTO]] = []
            outcomes = []
            for match in matches:
                outcome = await self.issuer.issue(snapshot, match, family_id, now)
                outcomes.append(outcome)
                if outcome.outcome == IssuanceOutcome.ISSUED:
                    issued.append((match, outcome))

            # Step 5: Mark processed
            marked = await self.event_repo.mark_processed(snapshot.id, now)
            await self.uow.commit()
            if not marked:
                logger.info(f"Domain event {snapshot.id} was marked processed by another worker")

            # Step 6: Notify
            for match, outcome in issued:
                await self._notify(snapshot, match, outcome, family_id)

            return Return.ok(
                ProcessDomainEventResponseDTO(event_id=snapshot.id, outcomes=outcomes)
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Processing domain event {command.event_id} failed: {e}")
            return Return.err(failure("PROCESS_DOMAIN_EVENT_FAILED", "Failed to process domain event", e))

    async def _notify(
        self,
        event: EventSnapshot,
        match: MatchedRule,
        outcome: RuleOutcomeDTO,
        family_id: Optional[str],
    ) -> None:
        if self.notification_service is None:
            return
        templates = {template.id: template for template in match.templates}
        for issued in outcome.codes:
            template = templates[issued.template_id]
            notice = DiscountIssuedNotice(
                subject_id=event.subject_id,
                code=issued.code,
                code_id=issued.code_id,
                rule_name=match.rule.name,
                discount_kind=template.kind.value,
                value=template.value,
                family_id=family_id,
                valid_until=issued.valid_until,
            )
            try:
                if not await self.notification_service.send_discount_issued(notice):
                    logger.warning(f"Notification for code {issued.code_id} was not delivered")
            except Exception as e:
                logger.error(f"Notification for code {issued.code_id} failed: {e}")
