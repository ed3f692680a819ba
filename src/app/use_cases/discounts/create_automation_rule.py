"""CreateAutomationRule Use Case

Validates and stores a new automation rule.
"""

from typing import Optional
from libs.result import Result, Return, Error
from pydantic import ValidationError
from src.app.repositories.automation_rule_repository import AutomationRuleRepository
from src.app.repositories.discount_template_repository import DiscountTemplateRepository
from src.app.services.enrollment_service import EnrollmentService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import INVALID_CONFIGURATION, failure
from src.domain.automation_rule import AutomationRule
from src.domain.rule_conditions import RuleConditions
from .dtos import AutomationRuleResponseDTO, CreateAutomationRuleCommandDTO


def _invalid(message: str, reason: Optional[str] = None) -> Result:
    return Return.err(Error(code=INVALID_CONFIGURATION, message=message, reason=reason))


class CreateAutomationRule:
    """
    Use Case: Create an automation rule

    Business Rules:
    1. max_uses_per_subject, when set, is at least 1
    2. valid_from <= valid_until when both are set
    3. conditions use only the supported keys, with consistent bounds
    4. The template and every additional template exist and are active
    5. Every listed program exists and is active

    Any violation is INVALID_CONFIGURATION; nothing is stored.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rule_repo: AutomationRuleRepository,
        template_repo: DiscountTemplateRepository,
        enrollment_service: EnrollmentService,
    ):
        self.uow = uow
        self.rule_repo = rule_repo
        self.template_repo = template_repo
        self.enrollment_service = enrollment_service

    async def execute(self, command: CreateAutomationRuleCommandDTO) -> Result[AutomationRuleResponseDTO]:
        # Step 1: Shape checks
        if command.max_uses_per_subject is not None and command.max_uses_per_subject < 1:
            return _invalid("max_uses_per_subject must be at least 1")

        if (
            command.valid_from is not None
            and command.valid_until is not None
            and command.valid_from > command.valid_until
        ):
            return _invalid("valid_from must not be after valid_until")

        try:
            conditions = RuleConditions.model_validate(command.conditions)
        except ValidationError as e:
            return _invalid("Invalid rule conditions", reason=str(e))

        try:
            # Step 2: Templates, first template first
            template = await self.template_repo.get_by_id(command.template_id)
            if template is None or not template.is_active:
                return _invalid(f"Discount template {command.template_id} is missing or inactive")

            additional_template_ids = [
                template_id
                for template_id in dict.fromkeys(command.additional_template_ids)
                if template_id != template.id
            ]
            if additional_template_ids:
                found = await self.template_repo.get_many(set(additional_template_ids))
                unavailable = [
                    template_id
                    for template_id in additional_template_ids
                    if template_id not in found or not found[template_id].is_active
                ]
                if unavailable:
                    return _invalid(
                        "Unknown or inactive discount templates",
                        reason=", ".join(unavailable),
                    )

            # Step 3: Programs
            programs = list(dict.fromkeys(command.applicable_programs))
            unavailable = await self.enrollment_service.get_inactive_program_ids(programs)
            if unavailable:
                return _invalid(
                    "Unknown or inactive programs",
                    reason=", ".join(sorted(unavailable)),
                )

            # Step 4: Store
            rule = await self.rule_repo.create(
                AutomationRule(
                    name=command.name,
                    event_kind=command.event_kind,
                    template_id=template.id,
                    additional_template_ids=additional_template_ids,
                    applicable_programs=programs,
                    conditions=conditions.to_json() or None,
                    max_uses_per_subject=command.max_uses_per_subject,
                    is_active=command.is_active,
                    valid_from=command.valid_from,
                    valid_until=command.valid_until,
                )
            )
            response = AutomationRuleResponseDTO(
                rule_id=rule.id,
                name=rule.name,
                event_kind=command.event_kind.value,
                template_id=rule.template_id,
                additional_template_ids=list(rule.additional_template_ids),
                applicable_programs=list(rule.applicable_programs),
                conditions=dict(rule.conditions or {}),
                max_uses_per_subject=rule.max_uses_per_subject,
                is_active=rule.is_active,
                valid_from=rule.valid_from,
                valid_until=rule.valid_until,
                created_at=rule.created_at,
            )

            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(failure("CREATE_AUTOMATION_RULE_FAILED", "Failed to create automation rule", e))
