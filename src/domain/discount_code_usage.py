"""Discount Code Usage Entity

One redemption of a discount code by one payment.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, generate_uuid, utc_now


class DiscountCodeUsage(BaseModel, table=True):
    """
    Discount Code Usage

    Domain Rules:
    - payment_id is unique: a payment consumes at most one code, once
    - Deleted (with a matching current_uses decrement) when the payment fails
    """

    __tablename__ = "discount_code_usage"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    code_id: str = Field(
        sa_column=Column(String, ForeignKey("discount_codes.id", ondelete="CASCADE"), nullable=False, index=True),
    )

    payment_id: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True),
        description="Payment that consumed the code"
    )

    subject_id: str = Field(
        sa_column=Column(String(64), nullable=False),
    )

    family_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
    )

    used_at: datetime = Field(default_factory=utc_now)
