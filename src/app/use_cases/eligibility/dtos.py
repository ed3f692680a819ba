"""Data Transfer Objects for Eligibility Use Cases"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class PaymentEligibilityQueryDTO(BaseModel):
    """Input to EvaluatePaymentEligibility"""

    subject_id: str = Field(..., description="Subject identifier")

    as_of: Optional[date] = Field(
        default=None,
        description="Evaluation date (defaults to today, UTC)"
    )


class PaymentEligibilityResponseDTO(BaseModel):
    """
    Payment-based eligibility of one subject

    reason is one of Trial, PaidMonthly, PaidYearly, Expired.
    """

    subject_id: str
    eligible: bool
    reason: str
    last_payment_date: Optional[date] = None
    plan_kind: Optional[str] = None
    evaluated_on: date

    class Config:
        json_schema_extra = {
            "example": {
                "subject_id": "student_42",
                "eligible": False,
                "reason": "Expired",
                "last_payment_date": "2024-01-01",
                "plan_kind": "monthly",
                "evaluated_on": "2024-02-10",
            }
        }


class RegistrationEligibilityQueryDTO(BaseModel):
    """Input to EvaluateRegistrationEligibility"""

    event_id: str = Field(..., description="Scheduled event identifier")
    subject_id: str = Field(..., description="Subject identifier")
    as_of: Optional[date] = Field(default=None, description="Evaluation date")


class RegistrationEligibilityResponseDTO(BaseModel):
    """
    Registration eligibility of one subject for one event

    violations lists every failed constraint in priority order; primary_reason
    is its first element.
    """

    event_id: str
    subject_id: str
    eligible: bool
    primary_reason: Optional[str] = None
    violations: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "event_id": "event_7",
                "subject_id": "student_42",
                "eligible": False,
                "primary_reason": "event_full",
                "violations": ["event_full", "student_belt_rank_too_low"],
            }
        }
