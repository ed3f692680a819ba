"""Automation Rule Matcher

Finds the active automation rules a domain event satisfies. Returns plain
snapshots so callers never touch ORM state after a per-rule rollback.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from src.app.repositories.automation_rule_repository import AutomationRuleRepository
from src.app.repositories.discount_template_repository import DiscountTemplateRepository
from src.app.services.enrollment_service import EnrollmentService
from src.app.services.subject_directory import SubjectDirectory
from src.domain.automation_rule import AutomationRule
from src.domain.discount_template import DiscountKind, DiscountScope, DiscountTemplate, UsageType
from src.domain.domain_event import DomainEvent, DomainEventKind
from src.domain.eligibility_clock import is_within_window
from src.domain.rule_conditions import RuleConditions, SubjectAttributes, conditions_met

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventSnapshot:
    id: str
    kind: DomainEventKind
    subject_id: str
    context_id: Optional[str]
    payload: dict[str, Any]
    occurred_at: datetime

    @classmethod
    def from_entity(cls, event: DomainEvent) -> "EventSnapshot":
        return cls(
            id=event.id,
            kind=DomainEventKind(event.kind),
            subject_id=event.subject_id,
            context_id=event.context_id,
            payload=dict(event.payload or {}),
            occurred_at=event.occurred_at,
        )


@dataclass(frozen=True)
class RuleSnapshot:
    id: str
    name: str
    template_id: str
    max_uses_per_subject: Optional[int]
    valid_until: Optional[datetime]
    additional_template_ids: tuple[str, ...] = ()

    @classmethod
    def from_entity(cls, rule: AutomationRule) -> "RuleSnapshot":
        return cls(
            id=rule.id,
            name=rule.name,
            template_id=rule.template_id,
            additional_template_ids=tuple(rule.template_ids()[1:]),
            max_uses_per_subject=rule.max_uses_per_subject,
            valid_until=rule.valid_until,
        )


@dataclass(frozen=True)
class TemplateSnapshot:
    id: str
    name: str
    kind: DiscountKind
    value: Decimal
    scope: DiscountScope
    usage_type: UsageType
    max_uses: Optional[int]
    default_validity_days: Optional[int]

    @classmethod
    def from_entity(cls, template: DiscountTemplate) -> "TemplateSnapshot":
        return cls(
            id=template.id,
            name=template.name,
            kind=DiscountKind(template.kind),
            value=template.value,
            scope=DiscountScope(template.scope),
            usage_type=UsageType(template.usage_type),
            max_uses=template.slots_per_code(),
            default_validity_days=template.default_validity_days,
        )


@dataclass(frozen=True)
class MatchedRule:
    """A rule with the active templates it issues from, first template first"""

    rule: RuleSnapshot
    template: TemplateSnapshot
    additional_templates: tuple[TemplateSnapshot, ...] = ()

    @property
    def templates(self) -> tuple[TemplateSnapshot, ...]:
        return (self.template,) + self.additional_templates


class _SubjectFacts:
    """Loads each subject fact at most once, and only when a rule asks for it"""

    def __init__(self, subject_id: str, enrollment_service: EnrollmentService, subject_directory: SubjectDirectory):
        self.subject_id = subject_id
        self.enrollment_service = enrollment_service
        self.subject_directory = subject_directory
        self._programs: Optional[set[str]] = None
        self._profile_loaded = False
        self._birth_date = None
        self._rank_loaded = False
        self._rank = None
        self._attendance: Optional[int] = None
        self._family_id: Optional[str] = None
        self._family_size_loaded = False
        self._family_size: Optional[int] = None

    async def programs(self) -> set[str]:
        if self._programs is None:
            self._programs = await self.enrollment_service.get_active_program_ids(self.subject_id)
        return self._programs

    async def attributes(self, conditions: RuleConditions) -> SubjectAttributes:
        if (conditions.needs_age or conditions.needs_family_size) and not self._profile_loaded:
            profile = await self.subject_directory.get_profile(self.subject_id)
            self._birth_date = profile.birth_date if profile else None
            self._family_id = profile.family_id if profile else None
            self._profile_loaded = True
        if conditions.needs_rank and not self._rank_loaded:
            self._rank = await self.subject_directory.get_current_rank(self.subject_id)
            self._rank_loaded = True
        if conditions.needs_attendance and self._attendance is None:
            self._attendance = await self.subject_directory.get_attendance_count(self.subject_id)
        if conditions.needs_family_size and not self._family_size_loaded:
            if self._family_id is not None:
                self._family_size = await self.subject_directory.get_family_size(self._family_id)
            self._family_size_loaded = True
        return SubjectAttributes(
            birth_date=self._birth_date,
            current_rank=self._rank,
            attendance_count=self._attendance,
            family_size=self._family_size,
        )


class AutomationRuleMatcher:
    """
    Matches a domain event against automation rules

    A rule matches when:
    - its event kind equals the event's kind and it is active
    - `now` lies inside [valid_from, valid_until] (inclusive, missing = unbounded)
    - its first template exists and is active (inactive additional templates
      are skipped)
    - applicable_programs is empty, or the subject is enrolled in one of them
    - every present condition holds for the subject
    """

    def __init__(
        self,
        rule_repo: AutomationRuleRepository,
        template_repo: DiscountTemplateRepository,
        enrollment_service: EnrollmentService,
        subject_directory: SubjectDirectory,
    ):
        self.rule_repo = rule_repo
        self.template_repo = template_repo
        self.enrollment_service = enrollment_service
        self.subject_directory = subject_directory

    async def match(self, event: EventSnapshot, now: datetime) -> list[MatchedRule]:
        rules = [
            rule
            for rule in await self.rule_repo.list_active_for_kind(event.kind)
            if is_within_window(now, rule.valid_from, rule.valid_until)
        ]
        if not rules:
            return []

        templates = await self.template_repo.get_many(
            {template_id for rule in rules for template_id in rule.template_ids()}
        )
        facts = _SubjectFacts(event.subject_id, self.enrollment_service, self.subject_directory)

        matched = []
        for rule in rules:
            template = templates.get(rule.template_id)
            if template is None or not template.is_active:
                logger.warning(f"Rule {rule.id} skipped: template {rule.template_id} missing or inactive")
                continue

            additional = []
            for template_id in rule.template_ids()[1:]:
                extra = templates.get(template_id)
                if extra is None or not extra.is_active:
                    logger.warning(f"Rule {rule.id}: template {template_id} missing or inactive, not issued")
                    continue
                additional.append(TemplateSnapshot.from_entity(extra))

            if rule.applicable_programs:
                if not (await facts.programs()) & set(rule.applicable_programs):
                    continue

            try:
                conditions = rule.parsed_conditions()
            except ValueError as e:
                logger.error(f"Rule {rule.id} skipped: stored conditions are invalid: {e}")
                continue

            if not conditions_met(conditions, await facts.attributes(conditions), now.date()):
                continue

            matched.append(
                MatchedRule(
                    rule=RuleSnapshot.from_entity(rule),
                    template=TemplateSnapshot.from_entity(template),
                    additional_templates=tuple(additional),
                )
            )

        return matched
