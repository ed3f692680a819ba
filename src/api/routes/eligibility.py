"""Eligibility API Routes

Read-only eligibility checks.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.adapter.use_case_factory import (
    build_evaluate_payment_eligibility,
    build_evaluate_registration_eligibility,
)
from src.api.error import ClientError, raise_for
from src.app.use_cases.eligibility.dtos import (
    PaymentEligibilityQueryDTO,
    PaymentEligibilityResponseDTO,
    RegistrationEligibilityQueryDTO,
    RegistrationEligibilityResponseDTO,
)
from src.app.use_cases.errors import EVENT_NOT_FOUND, SUBJECT_NOT_FOUND
from src.depends import get_session
from src.domain.registration_eligibility import RegistrationViolation

router = APIRouter(prefix="/eligibility", tags=["Eligibility"])

NOT_FOUND_EXAMPLE = {
    "description": "Subject or event not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "SUBJECT_NOT_FOUND",
                    "message": "Subject student_42 not found"
                }
            }
        }
    }
}


@router.get(
    "/payments/{subject_id}",
    response_model=PaymentEligibilityResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_EXAMPLE},
)
async def get_payment_eligibility(
    subject_id: str,
    as_of: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
):
    """
    Payment-based eligibility of a subject.

    **Returns:**
    - 200: `eligible` plus `reason` (Trial, PaidMonthly, PaidYearly, Expired)
    - 404: Subject not found
    """
    use_case = build_evaluate_payment_eligibility(session)
    result = await use_case.execute(PaymentEligibilityQueryDTO(subject_id=subject_id, as_of=as_of))

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get(
    "/events/{event_id}/subjects/{subject_id}",
    response_model=RegistrationEligibilityResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_EXAMPLE},
)
async def get_registration_eligibility(
    event_id: str,
    subject_id: str,
    as_of: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
):
    """
    Whether a subject may register for a scheduled event.

    Ineligibility is a 200 response listing every violated constraint in
    priority order; `primary_reason` is the one to show.

    **Returns:**
    - 200: Eligibility with `primary_reason` and `violations`
    - 404: Event or subject not found
    """
    use_case = build_evaluate_registration_eligibility(session)
    result = await use_case.execute(
        RegistrationEligibilityQueryDTO(event_id=event_id, subject_id=subject_id, as_of=as_of)
    )

    if result.is_err():
        raise_for(result.error)

    eligibility = result.value
    if eligibility.primary_reason == RegistrationViolation.EVENT_NOT_FOUND.value:
        raise ClientError(
            Error(code=EVENT_NOT_FOUND, message=f"Event {event_id} not found"),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    if eligibility.primary_reason == RegistrationViolation.SUBJECT_NOT_FOUND.value:
        raise ClientError(
            Error(code=SUBJECT_NOT_FOUND, message=f"Subject {subject_id} not found"),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return eligibility
