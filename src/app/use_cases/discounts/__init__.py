"""Discount automation use cases"""
from .record_domain_event import RecordDomainEvent
from .event_triggers import DomainEventTriggers
from .rule_matcher import AutomationRuleMatcher, EventSnapshot, MatchedRule, RuleSnapshot, TemplateSnapshot
from .code_generator import CODE_ALPHABET, CodeGenerationError, DiscountCodeGenerator
from .discount_issuer import DiscountIssuer, code_valid_until
from .process_domain_event import ProcessDomainEvent
from .redeem_discount_code import RedeemDiscountCode
from .revoke_assignments import RevokeAssignmentsForPayment
from .create_automation_rule import CreateAutomationRule
from .list_discount_assignments import ListDiscountAssignments
from .dtos import (
    RecordDomainEventCommandDTO,
    DomainEventResponseDTO,
    ProcessDomainEventCommandDTO,
    ProcessDomainEventResponseDTO,
    IssuanceOutcome,
    IssuedCodeDTO,
    RuleOutcomeDTO,
    RedeemDiscountCodeCommandDTO,
    RedemptionResponseDTO,
    RevokeAssignmentsCommandDTO,
    RevocationResponseDTO,
    CreateAutomationRuleCommandDTO,
    AutomationRuleResponseDTO,
    ListDiscountAssignmentsQueryDTO,
    DiscountAssignmentDTO,
    DiscountAssignmentListDTO,
    EventProcessingResultDTO,
    BirthdayEventsResultDTO,
)

__all__ = [
    "RecordDomainEvent",
    "DomainEventTriggers",
    "AutomationRuleMatcher",
    "EventSnapshot",
    "MatchedRule",
    "RuleSnapshot",
    "TemplateSnapshot",
    "CODE_ALPHABET",
    "CodeGenerationError",
    "DiscountCodeGenerator",
    "DiscountIssuer",
    "code_valid_until",
    "ProcessDomainEvent",
    "RedeemDiscountCode",
    "RevokeAssignmentsForPayment",
    "CreateAutomationRule",
    "ListDiscountAssignments",
    "RecordDomainEventCommandDTO",
    "DomainEventResponseDTO",
    "ProcessDomainEventCommandDTO",
    "ProcessDomainEventResponseDTO",
    "IssuanceOutcome",
    "IssuedCodeDTO",
    "RuleOutcomeDTO",
    "RedeemDiscountCodeCommandDTO",
    "RedemptionResponseDTO",
    "RevokeAssignmentsCommandDTO",
    "RevocationResponseDTO",
    "CreateAutomationRuleCommandDTO",
    "AutomationRuleResponseDTO",
    "ListDiscountAssignmentsQueryDTO",
    "DiscountAssignmentDTO",
    "DiscountAssignmentListDTO",
    "EventProcessingResultDTO",
    "BirthdayEventsResultDTO",
]
