"""Discount Template Entity

Administrator-maintained blueprint that automation rules turn into codes.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid, utc_now


class DiscountKind(str, Enum):
    """How the discount value is applied"""
    FIXED_AMOUNT = "fixed_amount"
    PERCENTAGE = "percentage"


class DiscountScope(str, Enum):
    """Who may redeem an issued code"""
    PER_SUBJECT = "per_student"
    PER_FAMILY = "per_family"


class UsageType(str, Enum):
    """Whether a code is meant to be used once or repeatedly"""
    ONE_TIME = "one_time"
    ONGOING = "ongoing"


class DiscountTemplate(BaseModel, table=True):
    """
    Discount Template - read-only configuration for the engine

    Domain Rules:
    - value > 0; percentage values are at most 100
    - max_uses is None (unlimited) or >= 1
    - default_validity_days applies when the issuing rule has no end date
    """

    __tablename__ = "discount_templates"
    __table_args__ = (
        CheckConstraint('value > 0', name='template_value_positive'),
        CheckConstraint('max_uses IS NULL OR max_uses >= 1', name='template_max_uses_positive'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Template identifier (UUID)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    kind: DiscountKind = Field(description="Fixed amount or percentage")

    value: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Amount in currency units, or percentage points"
    )

    scope: DiscountScope = Field(description="Per subject or per family")

    usage_type: UsageType = Field(description="One-time or ongoing")

    max_uses: Optional[int] = Field(
        default=None,
        description="Maximum redemptions per issued code (None = unlimited)"
    )

    default_validity_days: Optional[int] = Field(
        default=None,
        description="Validity of issued codes when the rule has no end date"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now)

    def slots_per_code(self) -> Optional[int]:
        """Usage slots an issued code carries; one-time codes always get one"""
        if self.max_uses is not None:
            return self.max_uses
        if self.usage_type == UsageType.ONE_TIME:
            return 1
        return None
