"""Domain Event Triggers

Convenience recorders called by the subsystems where things happen
(enrollment, payments, belt awards, attendance, referrals). Each one decides
whether the occurrence is worth an event and records it through
RecordDomainEvent.
"""

from datetime import date
from typing import Optional
from libs.result import Result, Return
from src.app.services.payment_history_service import PaymentHistoryService
from src.app.services.subject_directory import SubjectDirectory
from src.app.use_cases.errors import failure
from src.domain.belt_rank import BeltRank
from src.domain.domain_event import DomainEventKind
from .dtos import DomainEventResponseDTO, RecordDomainEventCommandDTO
from .record_domain_event import RecordDomainEvent


class DomainEventTriggers:
    """
    Trigger helpers in front of RecordDomainEvent

    Business Rules:
    1. First payment fires only when the subject has exactly one successful payment
    2. Attendance milestones fire on every multiple of milestone_interval
    3. Helpers return Ok(None) when nothing was recorded
    """

    def __init__(
        self,
        record_event: RecordDomainEvent,
        payment_history: PaymentHistoryService,
        subject_directory: SubjectDirectory,
        milestone_interval: int = 5,
    ):
        if milestone_interval < 1:
            raise ValueError("milestone_interval must be at least 1")
        self.record_event = record_event
        self.payment_history = payment_history
        self.subject_directory = subject_directory
        self.milestone_interval = milestone_interval

    async def _record(
        self,
        kind: DomainEventKind,
        subject_id: str,
        context_id: Optional[str] = None,
        **payload,
    ) -> Result[Optional[DomainEventResponseDTO]]:
        return await self.record_event.execute(
            RecordDomainEventCommandDTO(
                kind=kind,
                subject_id=subject_id,
                context_id=context_id,
                payload=payload,
            )
        )

    async def on_enrollment(self, subject_id: str, program_id: str) -> Result[Optional[DomainEventResponseDTO]]:
        return await self._record(
            DomainEventKind.ENROLLMENT, subject_id, context_id=program_id, program_id=program_id
        )

    async def on_payment_succeeded(
        self, subject_id: str, payment_id: str
    ) -> Result[Optional[DomainEventResponseDTO]]:
        try:
            count = await self.payment_history.count_successful_payments(subject_id)
        except Exception as e:
            return Return.err(failure("RECORD_DOMAIN_EVENT_FAILED", "Failed to count payments", e))

        if count != 1:
            return Return.ok(None)
        return await self._record(DomainEventKind.FIRST_PAYMENT, subject_id, payment_id=payment_id)

    async def on_rank_promotion(
        self,
        subject_id: str,
        new_rank: BeltRank,
        previous_rank: Optional[BeltRank] = None,
    ) -> Result[Optional[DomainEventResponseDTO]]:
        return await self._record(
            DomainEventKind.RANK_PROMOTION,
            subject_id,
            new_belt_rank=new_rank.value,
            previous_belt_rank=previous_rank.value if previous_rank else None,
        )

    async def on_attendance_recorded(self, subject_id: str) -> Result[Optional[DomainEventResponseDTO]]:
        try:
            count = await self.subject_directory.get_attendance_count(subject_id)
        except Exception as e:
            return Return.err(failure("RECORD_DOMAIN_EVENT_FAILED", "Failed to count attendance", e))

        if count == 0 or count % self.milestone_interval != 0:
            return Return.ok(None)
        return await self._record(
            DomainEventKind.ATTENDANCE_MILESTONE, subject_id, attendance_count=count
        )

    async def on_referral(
        self, referrer_subject_id: str, referred_family_id: str
    ) -> Result[Optional[DomainEventResponseDTO]]:
        return await self._record(
            DomainEventKind.REFERRAL,
            referrer_subject_id,
            context_id=referred_family_id,
            referred_family_id=referred_family_id,
        )

    async def on_birthday(self, subject_id: str, on: date) -> Result[Optional[DomainEventResponseDTO]]:
        return await self._record(DomainEventKind.BIRTHDAY, subject_id, birthday=on.isoformat())

    async def on_seasonal_promotion(
        self, subject_id: str, promotion: str
    ) -> Result[Optional[DomainEventResponseDTO]]:
        return await self._record(
            DomainEventKind.SEASONAL_PROMOTION, subject_id, context_id=promotion, promotion=promotion
        )
