"""Domain Event Entity

Append-only ledger of occurrences that may trigger automated discounts.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, String
from src.domain.base import BaseModel, generate_uuid, utc_now


class DomainEventKind(str, Enum):
    """Kinds of domain events"""
    ENROLLMENT = "student_enrollment"
    FIRST_PAYMENT = "first_payment"
    RANK_PROMOTION = "belt_promotion"
    ATTENDANCE_MILESTONE = "attendance_milestone"
    REFERRAL = "family_referral"
    BIRTHDAY = "birthday"
    SEASONAL_PROMOTION = "seasonal_promotion"


class DomainEvent(BaseModel, table=True):
    """
    Domain Event - one recorded occurrence for one subject

    Domain Rules:
    - Created once and never deleted by the engine
    - processed_at is the only mutable column and is set at most once
    - A set processed_at means every active rule was evaluated for this event,
      so re-delivery of the same event id is a no-op
    """

    __tablename__ = "domain_events"
    __table_args__ = (
        Index('ix_domain_events_subject_kind', 'subject_id', 'kind'),
        Index('ix_domain_events_processed_at', 'processed_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Event identifier (UUID)"
    )

    kind: DomainEventKind = Field(
        description="What happened"
    )

    subject_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Subject the event is about"
    )

    context_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Optional context (family, program, referred family...)"
    )

    payload: Optional[dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Free-form event data"
    )

    occurred_at: datetime = Field(
        default_factory=utc_now,
        description="When the event was recorded"
    )

    processed_at: Optional[datetime] = Field(
        default=None,
        description="When rule matching completed (idempotency marker)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "9d8f5d0e-4b7e-4a4d-a1f0-0f6d8a1d2c11",
                "kind": "belt_promotion",
                "subject_id": "student_42",
                "context_id": "family_7",
                "payload": {"new_belt_rank": "green"},
                "occurred_at": "2024-03-01T10:00:00Z",
                "processed_at": None,
            }
        }
