"""Discount Code Entity

A concrete, redeemable code issued to one subject.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String
from src.domain.base import BaseModel, generate_uuid, utc_now
from src.domain.discount_template import DiscountKind, DiscountScope, UsageType


class DiscountCode(BaseModel, table=True):
    """
    Discount Code - issued by the engine, consumed by billing

    Domain Rules:
    - code is unique
    - 0 <= current_uses, and current_uses <= max_uses when max_uses is set
    - current_uses changes only through single atomic UPDATE statements
      (redemption increments, compensation decrements)
    - valid_until None means no end date
    """

    __tablename__ = "discount_codes"
    __table_args__ = (
        CheckConstraint('current_uses >= 0', name='code_current_uses_non_negative'),
        CheckConstraint(
            'max_uses IS NULL OR current_uses <= max_uses',
            name='code_current_uses_within_max',
        ),
        Index('ix_discount_codes_owner_subject', 'owner_subject_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Code identifier (UUID)"
    )

    code: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True),
        description="Human-enterable code, e.g. AUTO4K7QX2PZ"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    template_id: Optional[str] = Field(default=None, description="Source template")

    rule_id: Optional[str] = Field(default=None, description="Issuing automation rule")

    kind: DiscountKind = Field(description="Fixed amount or percentage")

    value: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
    )

    scope: DiscountScope = Field(description="Per subject or per family")

    usage_type: UsageType = Field(description="One-time or ongoing")

    current_uses: int = Field(default=0)

    max_uses: Optional[int] = Field(default=None)

    owner_subject_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Subject the code was issued to"
    )

    owner_family_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Family of the owner, used by per-family codes"
    )

    valid_from: datetime = Field(default_factory=utc_now)

    valid_until: Optional[datetime] = Field(default=None)

    is_active: bool = Field(default=True)

    created_automatically: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)

    updated_at: datetime = Field(default_factory=utc_now)

    def has_capacity(self) -> bool:
        return self.max_uses is None or self.current_uses < self.max_uses

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5a4e0000-0000-4000-8000-000000000003",
                "code": "AUTO4K7QX2PZ",
                "name": "Promotion reward - Auto Assigned",
                "kind": "percentage",
                "value": "10.00",
                "scope": "per_student",
                "usage_type": "one_time",
                "current_uses": 0,
                "max_uses": 1,
                "owner_subject_id": "student_42",
                "valid_from": "2024-03-01T10:00:00Z",
                "valid_until": None,
            }
        }
