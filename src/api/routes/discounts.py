"""Discount Automation API Routes

Domain event intake, rule processing, code redemption and compensation, and
rule administration.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.notification_service import create_notification_service
from src.adapter.use_case_factory import (
    build_create_automation_rule,
    build_list_discount_assignments,
    build_process_domain_event,
    build_record_domain_event,
    build_redeem_discount_code,
    build_revoke_assignments,
)
from src.api.error import raise_for
from src.api.schemas.discount_request import (
    CreateAutomationRuleRequestSchema,
    PaymentStatusChangeRequestSchema,
    RecordDomainEventRequestSchema,
    RedeemCodeRequestSchema,
)
from src.app.use_cases.discounts.dtos import (
    AutomationRuleResponseDTO,
    CreateAutomationRuleCommandDTO,
    DiscountAssignmentListDTO,
    DomainEventResponseDTO,
    ListDiscountAssignmentsQueryDTO,
    ProcessDomainEventCommandDTO,
    ProcessDomainEventResponseDTO,
    RecordDomainEventCommandDTO,
    RedeemDiscountCodeCommandDTO,
    RedemptionResponseDTO,
    RevocationResponseDTO,
    RevokeAssignmentsCommandDTO,
)
from src.depends import get_session

router = APIRouter(prefix="/discounts", tags=["Discounts"])


def _error_example(code: str, message: str, description: str) -> dict:
    return {
        "description": description,
        "content": {
            "application/json": {
                "example": {"error": {"code": code, "message": message}}
            }
        }
    }


@router.post(
    "/events",
    response_model=DomainEventResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: _error_example("SUBJECT_NOT_FOUND", "Subject student_42 not found", "Unknown subject"),
    }
)
async def record_domain_event(
    request: RecordDomainEventRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Record a domain event.

    The event is matched against automation rules by the event processor
    worker, or immediately via `POST /discounts/events/{event_id}/process`.
    """
    use_case = build_record_domain_event(session)
    result = await use_case.execute(
        RecordDomainEventCommandDTO(
            kind=request.kind,
            subject_id=request.subject_id,
            context_id=request.context_id,
            payload=request.payload,
        )
    )

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.post(
    "/events/{event_id}/process",
    response_model=ProcessDomainEventResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: _error_example("DOMAIN_EVENT_NOT_FOUND", "Domain event evt_1 not found", "Unknown event"),
        503: _error_example("TRANSIENT_STORAGE_FAILURE", "Storage temporarily unavailable", "Retry later"),
    }
)
async def process_domain_event(
    event_id: str,
    session: AsyncSession = Depends(get_session),
):
    """
    Match a recorded event against the automation rules and issue codes.

    Idempotent: processing an already processed event returns
    `already_processed: true` and issues nothing.
    """
    use_case = build_process_domain_event(
        session, create_notification_service(ApplicationConfig.DISCOUNT_NOTIFICATION_WEBHOOK)
    )
    result = await use_case.execute(ProcessDomainEventCommandDTO(event_id=event_id))

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.post(
    "/codes/redeem",
    response_model=RedemptionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: _error_example("CODE_NOT_FOUND", "Discount code AUTO1234ABCD not found", "Unknown code"),
        409: _error_example("CODE_EXHAUSTED", "Discount code AUTO1234ABCD has no uses left", "No uses left"),
        400: _error_example("CODE_EXPIRED", "Discount code AUTO1234ABCD is not valid now", "Code not usable"),
    }
)
async def redeem_discount_code(
    request: RedeemCodeRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Consume one use of a discount code for a payment.

    Idempotent per `payment_id`: repeating the call returns the recorded
    usage with `already_recorded: true`.
    """
    use_case = build_redeem_discount_code(session)
    result = await use_case.execute(
        RedeemDiscountCodeCommandDTO(
            code=request.code,
            subject_id=request.subject_id,
            family_id=request.family_id,
            payment_id=request.payment_id,
        )
    )

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.post(
    "/payments/{payment_id}/status-change",
    response_model=RevocationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def payment_status_changed(
    payment_id: str,
    request: PaymentStatusChangeRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Report a payment status transition.

    A `pending` to `failed` transition releases the code use the payment
    consumed and removes the assignment once the code is unused. Any other
    transition returns `revoked: false`.
    """
    use_case = build_revoke_assignments(session)
    result = await use_case.execute(
        RevokeAssignmentsCommandDTO(
            payment_id=payment_id,
            previous_status=request.previous_status,
            new_status=request.new_status,
        )
    )

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.post(
    "/rules",
    response_model=AutomationRuleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: _error_example(
            "INVALID_CONFIGURATION",
            "Discount template tpl_1 is missing or inactive",
            "Rule configuration rejected",
        ),
    }
)
async def create_automation_rule(
    request: CreateAutomationRuleRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Create an automation rule binding an event kind to a discount template."""
    use_case = build_create_automation_rule(session)
    result = await use_case.execute(CreateAutomationRuleCommandDTO(**request.model_dump()))

    if result.is_err():
        raise_for(result.error)

    return result.value


@router.get(
    "/assignments",
    response_model=DiscountAssignmentListDTO,
    status_code=status.HTTP_200_OK,
)
async def list_discount_assignments(
    subject_id: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """List automatically issued assignments, newest first."""
    use_case = build_list_discount_assignments(session)
    result = await use_case.execute(
        ListDiscountAssignmentsQueryDTO(subject_id=subject_id, limit=limit, offset=offset)
    )

    if result.is_err():
        raise_for(result.error)

    return result.value
