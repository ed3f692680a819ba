"""Data Transfer Objects for Discount Automation Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
from src.domain.domain_event import DomainEvent, DomainEventKind
from src.domain.school_records import PaymentStatus


class RecordDomainEventCommandDTO(BaseModel):
    """
    Command DTO for recording a domain event

    Used as input to RecordDomainEvent use case.
    """

    kind: DomainEventKind = Field(..., description="What happened")

    subject_id: str = Field(..., min_length=1, description="Subject the event is about")

    context_id: Optional[str] = Field(
        default=None,
        description="Optional context (family, program, referred family...)"
    )

    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form event data"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "kind": "belt_promotion",
                "subject_id": "student_42",
                "context_id": None,
                "payload": {"new_belt_rank": "green"},
            }
        }


class DomainEventResponseDTO(BaseModel):
    event_id: str
    kind: str
    subject_id: str
    context_id: Optional[str] = None
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime
    processed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, event: DomainEvent) -> "DomainEventResponseDTO":
        return cls(
            event_id=event.id,
            kind=DomainEventKind(event.kind).value,
            subject_id=event.subject_id,
            context_id=event.context_id,
            payload=event.payload or {},
            occurred_at=event.occurred_at,
            processed_at=event.processed_at,
        )


class ProcessDomainEventCommandDTO(BaseModel):
    event_id: str = Field(..., description="Domain event to match against automation rules")


class IssuanceOutcome(str, Enum):
    """What happened for one matched rule"""
    ISSUED = "issued"
    ALREADY_ASSIGNED = "already_assigned"
    CEILING_REACHED = "ceiling_reached"


class IssuedCodeDTO(BaseModel):
    template_id: str
    code_id: str
    code: str
    valid_until: Optional[datetime] = None


class RuleOutcomeDTO(BaseModel):
    """
    What happened for one matched rule

    code_id, code and valid_until describe the code of the rule's first
    template; codes lists every code issued, in template order.
    """

    rule_id: str
    outcome: IssuanceOutcome
    code_id: Optional[str] = None
    code: Optional[str] = None
    valid_until: Optional[datetime] = None
    codes: list[IssuedCodeDTO] = Field(default_factory=list)


class ProcessDomainEventResponseDTO(BaseModel):
    """
    Result of processing one domain event

    already_processed is True when the event had been processed before; no
    rule was evaluated in that case.
    """

    event_id: str
    already_processed: bool = False
    outcomes: list[RuleOutcomeDTO] = Field(default_factory=list)

    @property
    def issued(self) -> list[RuleOutcomeDTO]:
        return [outcome for outcome in self.outcomes if outcome.outcome == IssuanceOutcome.ISSUED]

    class Config:
        json_schema_extra = {
            "example": {
                "event_id": "9d8f5d0e-4b7e-4a4d-a1f0-0f6d8a1d2c11",
                "already_processed": False,
                "outcomes": [
                    {
                        "rule_id": "3c2b1a00-0000-4000-8000-000000000001",
                        "outcome": "issued",
                        "code_id": "5a4e0000-0000-4000-8000-000000000003",
                        "code": "AUTO4K7QX2PZ",
                        "valid_until": None,
                    }
                ],
            }
        }


class RedeemDiscountCodeCommandDTO(BaseModel):
    """
    Command DTO for redeeming a discount code against a payment

    Redemption is idempotent per payment_id.
    """

    code: str = Field(..., min_length=1, description="Code as entered by the user")
    subject_id: str = Field(..., min_length=1, description="Subject paying")
    family_id: Optional[str] = Field(default=None, description="Family of the subject")
    payment_id: str = Field(..., min_length=1, description="Payment consuming the code")


class RedemptionResponseDTO(BaseModel):
    usage_id: str
    code_id: str
    code: str
    payment_id: str
    subject_id: str
    current_uses: int
    max_uses: Optional[int] = None
    already_recorded: bool = False
    used_at: datetime


class RevokeAssignmentsCommandDTO(BaseModel):
    """
    Payment status transition reported by the billing flow

    Only pending -> failed triggers compensation.
    """

    payment_id: str = Field(..., min_length=1)
    previous_status: PaymentStatus
    new_status: PaymentStatus


class RevocationResponseDTO(BaseModel):
    payment_id: str
    revoked: bool
    code_id: Optional[str] = None
    assignments_deleted: int = 0


class CreateAutomationRuleCommandDTO(BaseModel):
    """
    Command DTO for creating an automation rule

    Bounds are validated by the use case so violations surface as
    INVALID_CONFIGURATION rather than schema errors.
    """

    name: str = Field(..., min_length=1)
    event_kind: DomainEventKind
    template_id: str
    additional_template_ids: list[str] = Field(default_factory=list)
    applicable_programs: list[str] = Field(default_factory=list)
    conditions: dict[str, Any] = Field(default_factory=dict)
    max_uses_per_subject: Optional[int] = None
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Green belt promotion reward",
                "event_kind": "belt_promotion",
                "template_id": "7f1e0000-0000-4000-8000-000000000002",
                "additional_template_ids": [],
                "applicable_programs": [],
                "conditions": {"min_rank": "green"},
                "max_uses_per_subject": 1,
                "is_active": True,
                "valid_from": None,
                "valid_until": "2024-12-31T23:59:59",
            }
        }


class AutomationRuleResponseDTO(BaseModel):
    rule_id: str
    name: str
    event_kind: str
    template_id: str
    additional_template_ids: list[str] = Field(default_factory=list)
    applicable_programs: list[str]
    conditions: dict[str, Any]
    max_uses_per_subject: Optional[int] = None
    is_active: bool
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    created_at: datetime


class ListDiscountAssignmentsQueryDTO(BaseModel):
    subject_id: Optional[str] = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class DiscountAssignmentDTO(BaseModel):
    assignment_id: str
    rule_id: str
    event_id: str
    subject_id: str
    template_id: str
    code_id: str
    assigned_at: datetime
    expires_at: Optional[datetime] = None


class DiscountAssignmentListDTO(BaseModel):
    assignments: list[DiscountAssignmentDTO]
    limit: int
    offset: int


class EventProcessingResultDTO(BaseModel):
    """Summary of one DomainEventProcessorWorker batch"""

    total_events: int
    processed: int
    failed: int
    codes_issued: int
    execution_time_ms: int


class BirthdayEventsResultDTO(BaseModel):
    """Summary of one BirthdayEventWorker run"""

    run_date: date
    birthdays_found: int
    events_recorded: int
    already_recorded: int
    failed: int
    execution_time_ms: int
