from .domain_event_repository import DomainEventRepository
from .automation_rule_repository import AutomationRuleRepository
from .discount_template_repository import DiscountTemplateRepository
from .discount_code_repository import DiscountCodeRepository
from .discount_assignment_repository import DiscountAssignmentRepository
from .discount_code_usage_repository import DiscountCodeUsageRepository

__all__ = [
    "DomainEventRepository",
    "AutomationRuleRepository",
    "DiscountTemplateRepository",
    "DiscountCodeRepository",
    "DiscountAssignmentRepository",
    "DiscountCodeUsageRepository",
]
