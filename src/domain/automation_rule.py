"""Automation Rule Entity

Binds a domain event kind to one or more discount templates, with optional
program scope, subject conditions, validity window and per-subject ceiling.
"""

from datetime import datetime
from typing import Any, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, CheckConstraint, ForeignKey, String
from src.domain.base import BaseModel, generate_uuid, utc_now
from src.domain.domain_event import DomainEventKind
from src.domain.rule_conditions import RuleConditions


class AutomationRule(BaseModel, table=True):
    """
    Automation Rule - administrator configuration, read-only to the engine

    Domain Rules:
    - template_id is issued first, then additional_template_ids in list order
    - Empty applicable_programs means the rule applies to every subject
    - conditions holds a RuleConditions object; absent keys impose nothing
    - max_uses_per_subject is None (unlimited) or >= 1
    - validity bounds are inclusive; a missing bound is unbounded
    """

    __tablename__ = "discount_automation_rules"
    __table_args__ = (
        Index('ix_automation_rules_kind_active', 'event_kind', 'is_active'),
        CheckConstraint(
            'max_uses_per_subject IS NULL OR max_uses_per_subject >= 1',
            name='rule_max_uses_per_subject_positive',
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Rule identifier (UUID)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    event_kind: DomainEventKind = Field(
        description="Domain event kind that triggers this rule"
    )

    template_id: str = Field(
        sa_column=Column(String, ForeignKey("discount_templates.id"), nullable=False),
        description="First template used to materialize codes"
    )

    additional_template_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Further templates, each issuing its own code, in order"
    )

    applicable_programs: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Program IDs the subject must be enrolled in (empty = all)"
    )

    conditions: Optional[dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Subject conditions (min_age, max_age, min_rank, rank, min_attendance, min_family_size)"
    )

    max_uses_per_subject: Optional[int] = Field(
        default=None,
        description="Maximum events this rule fires for per subject (None = unlimited)"
    )

    is_active: bool = Field(default=True)

    valid_from: Optional[datetime] = Field(default=None)

    valid_until: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)

    updated_at: datetime = Field(default_factory=utc_now)

    def template_ids(self) -> list[str]:
        return list(dict.fromkeys([self.template_id, *(self.additional_template_ids or [])]))

    def parsed_conditions(self) -> RuleConditions:
        return RuleConditions.model_validate(self.conditions or {})

    class Config:
        json_schema_extra = {
            "example": {
                "id": "3c2b1a00-0000-4000-8000-000000000001",
                "name": "Green belt promotion reward",
                "event_kind": "belt_promotion",
                "template_id": "7f1e0000-0000-4000-8000-000000000002",
                "additional_template_ids": [],
                "applicable_programs": [],
                "conditions": {"min_rank": "green"},
                "max_uses_per_subject": 1,
                "is_active": True,
                "valid_from": None,
                "valid_until": "2024-12-31T23:59:59Z",
            }
        }
