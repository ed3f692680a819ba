"""Wiring of the discount and eligibility use cases over one session

Routes and workers build their use cases here so both get the same
collaborators.
"""

from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories.automation_rule_repository import SqlAlchemyAutomationRuleRepository
from src.adapter.repositories.discount_assignment_repository import SqlAlchemyDiscountAssignmentRepository
from src.adapter.repositories.discount_code_repository import SqlAlchemyDiscountCodeRepository
from src.adapter.repositories.discount_code_usage_repository import SqlAlchemyDiscountCodeUsageRepository
from src.adapter.repositories.discount_template_repository import SqlAlchemyDiscountTemplateRepository
from src.adapter.repositories.domain_event_repository import SqlAlchemyDomainEventRepository
from src.adapter.services.enrollment_service import SqlEnrollmentService
from src.adapter.services.event_catalog import SqlEventCatalog
from src.adapter.services.payment_history_service import SqlPaymentHistoryService
from src.adapter.services.subject_directory import SqlSubjectDirectory
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_service import NotificationService
from src.app.use_cases.discounts import (
    AutomationRuleMatcher,
    CreateAutomationRule,
    DiscountCodeGenerator,
    DiscountIssuer,
    DomainEventTriggers,
    ListDiscountAssignments,
    ProcessDomainEvent,
    RecordDomainEvent,
    RedeemDiscountCode,
    RevokeAssignmentsForPayment,
)
from src.app.use_cases.eligibility import EvaluatePaymentEligibility, EvaluateRegistrationEligibility
from src.domain.payment_eligibility import PaymentEligibilityEvaluator, default_windows
from src.domain.registration_eligibility import ConstraintEvaluator, EventStatus


def payment_evaluator(config=ApplicationConfig) -> PaymentEligibilityEvaluator:
    return PaymentEligibilityEvaluator(
        default_windows(
            monthly_days=int(config.ELIGIBILITY_MONTHLY_VALIDITY_DAYS),
            yearly_days=int(config.ELIGIBILITY_YEARLY_VALIDITY_DAYS),
        )
    )


def constraint_evaluator(config=ApplicationConfig) -> ConstraintEvaluator:
    return ConstraintEvaluator(
        open_statuses=frozenset(EventStatus(status) for status in config.REGISTRATION_OPEN_STATUSES)
    )


def build_evaluate_payment_eligibility(session: AsyncSession) -> EvaluatePaymentEligibility:
    return EvaluatePaymentEligibility(
        subject_directory=SqlSubjectDirectory(session),
        payment_history=SqlPaymentHistoryService(session),
        evaluator=payment_evaluator(),
    )


def build_evaluate_registration_eligibility(session: AsyncSession) -> EvaluateRegistrationEligibility:
    return EvaluateRegistrationEligibility(
        event_catalog=SqlEventCatalog(session),
        subject_directory=SqlSubjectDirectory(session),
        evaluator=constraint_evaluator(),
    )


def build_record_domain_event(session: AsyncSession) -> RecordDomainEvent:
    return RecordDomainEvent(
        uow=SqlAlchemyUnitOfWork(session),
        event_repo=SqlAlchemyDomainEventRepository(session),
        subject_directory=SqlSubjectDirectory(session),
    )


def build_event_triggers(session: AsyncSession) -> DomainEventTriggers:
    return DomainEventTriggers(
        record_event=build_record_domain_event(session),
        payment_history=SqlPaymentHistoryService(session),
        subject_directory=SqlSubjectDirectory(session),
        milestone_interval=int(ApplicationConfig.ATTENDANCE_MILESTONE_INTERVAL),
    )


def build_process_domain_event(
    session: AsyncSession,
    notification_service: Optional[NotificationService] = None,
) -> ProcessDomainEvent:
    uow = SqlAlchemyUnitOfWork(session)
    subject_directory = SqlSubjectDirectory(session)
    code_repo = SqlAlchemyDiscountCodeRepository(session)
    matcher = AutomationRuleMatcher(
        rule_repo=SqlAlchemyAutomationRuleRepository(session),
        template_repo=SqlAlchemyDiscountTemplateRepository(session),
        enrollment_service=SqlEnrollmentService(session),
        subject_directory=subject_directory,
    )
    issuer = DiscountIssuer(
        uow=uow,
        code_repo=code_repo,
        assignment_repo=SqlAlchemyDiscountAssignmentRepository(session),
        code_generator=DiscountCodeGenerator(
            code_repo,
            prefix=ApplicationConfig.DISCOUNT_CODE_PREFIX,
            length=int(ApplicationConfig.DISCOUNT_CODE_LENGTH),
        ),
    )
    return ProcessDomainEvent(
        uow=uow,
        event_repo=SqlAlchemyDomainEventRepository(session),
        matcher=matcher,
        issuer=issuer,
        subject_directory=subject_directory,
        notification_service=notification_service,
    )


def build_redeem_discount_code(session: AsyncSession) -> RedeemDiscountCode:
    return RedeemDiscountCode(
        uow=SqlAlchemyUnitOfWork(session),
        code_repo=SqlAlchemyDiscountCodeRepository(session),
        usage_repo=SqlAlchemyDiscountCodeUsageRepository(session),
    )


def build_revoke_assignments(session: AsyncSession) -> RevokeAssignmentsForPayment:
    return RevokeAssignmentsForPayment(
        uow=SqlAlchemyUnitOfWork(session),
        usage_repo=SqlAlchemyDiscountCodeUsageRepository(session),
        code_repo=SqlAlchemyDiscountCodeRepository(session),
        assignment_repo=SqlAlchemyDiscountAssignmentRepository(session),
    )


def build_create_automation_rule(session: AsyncSession) -> CreateAutomationRule:
    return CreateAutomationRule(
        uow=SqlAlchemyUnitOfWork(session),
        rule_repo=SqlAlchemyAutomationRuleRepository(session),
        template_repo=SqlAlchemyDiscountTemplateRepository(session),
        enrollment_service=SqlEnrollmentService(session),
    )


def build_list_discount_assignments(session: AsyncSession) -> ListDiscountAssignments:
    return ListDiscountAssignments(SqlAlchemyDiscountAssignmentRepository(session))
