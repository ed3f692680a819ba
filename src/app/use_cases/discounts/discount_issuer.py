"""Discount Issuer

Turns one matched rule into a discount code plus its assignment for each of
the rule's templates, in a single transaction per rule.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from src.app.repositories.discount_assignment_repository import DiscountAssignmentRepository
from src.app.repositories.discount_code_repository import DiscountCodeRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.discount_assignment import DiscountAssignment
from src.domain.discount_code import DiscountCode
from src.domain.discount_template import DiscountScope
from .code_generator import DiscountCodeGenerator
from .dtos import IssuanceOutcome, IssuedCodeDTO, RuleOutcomeDTO
from .rule_matcher import EventSnapshot, MatchedRule, TemplateSnapshot

logger = logging.getLogger(__name__)


def code_valid_until(
    match: MatchedRule, now: datetime, template: Optional[TemplateSnapshot] = None
) -> Optional[datetime]:
    """Rule end date, else now + template default validity, else open-ended"""
    template = template or match.template
    if match.rule.valid_until is not None:
        return match.rule.valid_until
    if template.default_validity_days is not None:
        return now + timedelta(days=template.default_validity_days)
    return None


class DiscountIssuer:
    """
    Issues codes for matched rules

    Business Rules:
    1. A rule with max_uses_per_subject stops issuing once it has fired for
       the subject on that many distinct events
    2. Every code of a rule firing and its assignment are committed together
       or not at all
    3. Templates are issued in rule order: template_id first, then
       additional_template_ids
    4. A (rule, event, subject, template) uniqueness conflict discards every
       code this writer created for the rule and reports already_assigned.
       The first template is part of every firing, so a rule fires at most
       once per (rule, event, subject)
    5. assignment.expires_at == code.valid_until

    Flow:
    1. Check the per-subject ceiling
    2. For each template: create the code, insert the assignment
       (conflict -> rolled back)
    3. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        code_repo: DiscountCodeRepository,
        assignment_repo: DiscountAssignmentRepository,
        code_generator: DiscountCodeGenerator,
    ):
        self.uow = uow
        self.code_repo = code_repo
        self.assignment_repo = assignment_repo
        self.code_generator = code_generator

    async def issue(
        self,
        event: EventSnapshot,
        match: MatchedRule,
        owner_family_id: Optional[str],
        now: datetime,
    ) -> RuleOutcomeDTO:
        rule = match.rule

        # Step 1: Per-subject ceiling
        if rule.max_uses_per_subject is not None:
            fired_so_far = await self.assignment_repo.count_for_subject(rule.id, event.subject_id)
            if fired_so_far >= rule.max_uses_per_subject:
                logger.info(
                    f"Rule {rule.id} reached its ceiling of {rule.max_uses_per_subject} "
                    f"for subject {event.subject_id}"
                )
                return RuleOutcomeDTO(rule_id=rule.id, outcome=IssuanceOutcome.CEILING_REACHED)

        # Step 2: One code and one assignment per template
        issued: list[IssuedCodeDTO] = []
        for template in match.templates:
            valid_until = code_valid_until(match, now, template)
            code = await self.code_repo.create(
                DiscountCode(
                    code=await self.code_generator.generate(),
                    name=f"{rule.name} - Auto Assigned",
                    template_id=template.id,
                    rule_id=rule.id,
                    kind=template.kind,
                    value=template.value,
                    scope=template.scope,
                    usage_type=template.usage_type,
                    current_uses=0,
                    max_uses=template.max_uses,
                    owner_subject_id=event.subject_id,
                    owner_family_id=owner_family_id if template.scope == DiscountScope.PER_FAMILY else None,
                    valid_from=now,
                    valid_until=valid_until,
                    created_automatically=True,
                )
            )
            issued.append(
                IssuedCodeDTO(
                    template_id=template.id, code_id=code.id, code=code.code, valid_until=valid_until
                )
            )

            # on conflict every code created above is rolled back with it
            assignment = await self.assignment_repo.assign(
                DiscountAssignment(
                    rule_id=rule.id,
                    event_id=event.id,
                    subject_id=event.subject_id,
                    template_id=template.id,
                    code_id=code.id,
                    assigned_at=now,
                    expires_at=valid_until,
                )
            )
            if assignment is None:
                return RuleOutcomeDTO(rule_id=rule.id, outcome=IssuanceOutcome.ALREADY_ASSIGNED)

        # Step 3: Commit this rule's issuance
        await self.uow.commit()

        logger.info(
            f"Issued {len(issued)} code(s) {', '.join(code.code for code in issued)} "
            f"to subject {event.subject_id} for rule {rule.id} and event {event.id}"
        )
        first = issued[0]
        return RuleOutcomeDTO(
            rule_id=rule.id,
            outcome=IssuanceOutcome.ISSUED,
            code_id=first.code_id,
            code=first.code,
            valid_until=first.valid_until,
            codes=issued,
        )
