from .domain_event_repository import SqlAlchemyDomainEventRepository
from .automation_rule_repository import SqlAlchemyAutomationRuleRepository
from .discount_template_repository import SqlAlchemyDiscountTemplateRepository
from .discount_code_repository import SqlAlchemyDiscountCodeRepository
from .discount_assignment_repository import SqlAlchemyDiscountAssignmentRepository
from .discount_code_usage_repository import SqlAlchemyDiscountCodeUsageRepository

__all__ = [
    "SqlAlchemyDomainEventRepository",
    "SqlAlchemyAutomationRuleRepository",
    "SqlAlchemyDiscountTemplateRepository",
    "SqlAlchemyDiscountCodeRepository",
    "SqlAlchemyDiscountAssignmentRepository",
    "SqlAlchemyDiscountCodeUsageRepository",
]
