"""Discount Assignment Entity

Links one rule firing, for one event, one subject and one of the rule's
templates, to the code it issued.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid, utc_now


class DiscountAssignment(BaseModel, table=True):
    """
    Discount Assignment - at-most-once record of an automated issuance

    Domain Rules:
    - (rule_id, event_id, subject_id, template_id) is unique; the storage
      constraint, not an application check, is what guarantees at-most-once
      issuance
    - expires_at mirrors the code's valid_until
    - Hard-deleted when the payment that consumed its code fails
    """

    __tablename__ = "discount_assignments"
    __table_args__ = (
        UniqueConstraint(
            'rule_id', 'event_id', 'subject_id', 'template_id',
            name='uq_discount_assignments_rule_event_subject_template',
        ),
        Index('ix_discount_assignments_rule_subject', 'rule_id', 'subject_id'),
        Index('ix_discount_assignments_code_id', 'code_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    rule_id: str = Field(
        sa_column=Column(String, ForeignKey("discount_automation_rules.id", ondelete="CASCADE"), nullable=False),
    )

    event_id: str = Field(
        sa_column=Column(String, ForeignKey("domain_events.id"), nullable=False),
    )

    subject_id: str = Field(
        sa_column=Column(String(64), nullable=False),
    )

    template_id: str = Field(
        sa_column=Column(String, ForeignKey("discount_templates.id"), nullable=False),
    )

    code_id: str = Field(
        sa_column=Column(String, ForeignKey("discount_codes.id", ondelete="CASCADE"), nullable=False),
    )

    assigned_at: datetime = Field(default_factory=utc_now)

    expires_at: Optional[datetime] = Field(default=None)
