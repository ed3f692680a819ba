"""Request schemas for the Discount Automation API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.domain_event import DomainEventKind
from src.domain.school_records import PaymentStatus


class RecordDomainEventRequestSchema(BaseModel):
    """
    Request schema for recording a domain event

    Used for POST /discounts/events endpoint.
    """

    kind: DomainEventKind = Field(..., description="Domain event kind")

    subject_id: str = Field(..., min_length=1, description="Subject the event is about")

    context_id: Optional[str] = Field(default=None, description="Optional context identifier")

    payload: Dict[str, Any] = Field(default_factory=dict, description="Free-form event data")

    class Config:
        json_schema_extra = {
            "example": {
                "kind": "attendance_milestone",
                "subject_id": "student_42",
                "payload": {"attendance_count": 25},
            }
        }


class RedeemCodeRequestSchema(BaseModel):
    """
    Request schema for redeeming a discount code

    Used for POST /discounts/codes/redeem endpoint.
    """

    code: str = Field(..., min_length=1, max_length=32, description="Code as entered")

    subject_id: str = Field(..., min_length=1)

    family_id: Optional[str] = Field(default=None)

    payment_id: str = Field(..., min_length=1, description="Payment consuming the code")

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v):
        """Codes are case-insensitive and stored upper-case"""
        v = v.strip().upper()
        if not v:
            raise ValueError("Code must not be blank")
        return v


class PaymentStatusChangeRequestSchema(BaseModel):
    """
    Request schema for reporting a payment status transition

    Used for POST /discounts/payments/{payment_id}/status-change endpoint.
    """

    previous_status: PaymentStatus

    new_status: PaymentStatus

    @field_validator('new_status')
    @classmethod
    def validate_transition(cls, v, info):
        if info.data.get('previous_status') == v:
            raise ValueError("new_status must differ from previous_status")
        return v


class CreateAutomationRuleRequestSchema(BaseModel):
    """
    Request schema for creating an automation rule

    Used for POST /discounts/rules endpoint. Semantic checks (template,
    programs, conditions, bounds) are done by the use case.
    """

    name: str = Field(..., min_length=1, max_length=255)

    event_kind: DomainEventKind

    template_id: str = Field(..., min_length=1)

    additional_template_ids: List[str] = Field(default_factory=list)

    applicable_programs: List[str] = Field(default_factory=list)

    conditions: Dict[str, Any] = Field(default_factory=dict)

    max_uses_per_subject: Optional[int] = None

    is_active: bool = True

    valid_from: Optional[datetime] = None

    valid_until: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Tenth class milestone",
                "event_kind": "attendance_milestone",
                "template_id": "7f1e0000-0000-4000-8000-000000000002",
                "applicable_programs": [],
                "conditions": {"min_attendance": 10},
                "max_uses_per_subject": 3,
            }
        }
