"""Unit tests for rule conditions and discount template slots"""

import pytest
from datetime import date
from decimal import Decimal
from pydantic import ValidationError

from src.domain.automation_rule import AutomationRule
from src.domain.belt_rank import BeltRank
from src.domain.discount_template import DiscountKind, DiscountScope, DiscountTemplate, UsageType
from src.domain.domain_event import DomainEventKind
from src.domain.rule_conditions import RuleConditions, SubjectAttributes, conditions_met

TODAY = date(2024, 5, 1)


class TestRuleConditionsValidation:

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            RuleConditions.model_validate({"min_age": 5, "favourite_colour": "red"})

    def test_inverted_age_bounds_rejected(self):
        with pytest.raises(ValidationError):
            RuleConditions(min_age=12, max_age=8)

    def test_negative_attendance_rejected(self):
        with pytest.raises(ValidationError):
            RuleConditions(min_attendance=-1)

    def test_to_json_omits_absent_keys(self):
        assert RuleConditions(min_rank=BeltRank.GREEN).to_json() == {"min_rank": "green"}
        assert RuleConditions().to_json() == {}

    def test_rule_parses_stored_conditions(self):
        rule = AutomationRule(
            name="Promotion",
            event_kind=DomainEventKind.RANK_PROMOTION,
            template_id="tpl_1",
            conditions={"rank": "blue"},
        )

        assert rule.parsed_conditions().rank == BeltRank.BLUE

    def test_rule_template_order_drops_duplicates(self):
        rule = AutomationRule(
            name="Promotion",
            event_kind=DomainEventKind.RANK_PROMOTION,
            template_id="tpl_1",
            additional_template_ids=["tpl_3", "tpl_1", "tpl_2", "tpl_3"],
        )

        assert rule.template_ids() == ["tpl_1", "tpl_3", "tpl_2"]


class TestConditionsMet:

    def test_empty_conditions_always_hold(self):
        assert conditions_met(RuleConditions(), SubjectAttributes(), TODAY) is True

    def test_age_bounds(self):
        conditions = RuleConditions(min_age=6, max_age=12)

        assert conditions_met(conditions, SubjectAttributes(birth_date=date(2014, 5, 1)), TODAY) is True
        assert conditions_met(conditions, SubjectAttributes(birth_date=date(2019, 5, 2)), TODAY) is False
        assert conditions_met(conditions, SubjectAttributes(birth_date=date(2010, 1, 1)), TODAY) is False

    def test_age_condition_fails_without_birth_date(self):
        assert conditions_met(RuleConditions(min_age=6), SubjectAttributes(), TODAY) is False

    def test_min_rank_and_exact_rank(self):
        green = SubjectAttributes(current_rank=BeltRank.GREEN)

        assert conditions_met(RuleConditions(min_rank=BeltRank.ORANGE), green, TODAY) is True
        assert conditions_met(RuleConditions(min_rank=BeltRank.BLUE), green, TODAY) is False
        assert conditions_met(RuleConditions(rank=BeltRank.GREEN), green, TODAY) is True
        assert conditions_met(RuleConditions(rank=BeltRank.BLUE), green, TODAY) is False

    def test_missing_rank_counts_as_white(self):
        assert conditions_met(RuleConditions(rank=BeltRank.WHITE), SubjectAttributes(), TODAY) is True

    def test_min_attendance(self):
        conditions = RuleConditions(min_attendance=10)

        assert conditions_met(conditions, SubjectAttributes(attendance_count=10), TODAY) is True
        assert conditions_met(conditions, SubjectAttributes(attendance_count=9), TODAY) is False
        assert conditions_met(conditions, SubjectAttributes(), TODAY) is False

    def test_min_family_size(self):
        conditions = RuleConditions(min_family_size=2)

        assert conditions_met(conditions, SubjectAttributes(family_size=2), TODAY) is True
        assert conditions_met(conditions, SubjectAttributes(family_size=1), TODAY) is False
        assert conditions_met(conditions, SubjectAttributes(family_size=None), TODAY) is True

    def test_min_family_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            RuleConditions(min_family_size=0)


class TestTemplateSlots:

    def make_template(self, usage_type, max_uses=None):
        return DiscountTemplate(
            name="Reward",
            kind=DiscountKind.PERCENTAGE,
            value=Decimal("10"),
            scope=DiscountScope.PER_SUBJECT,
            usage_type=usage_type,
            max_uses=max_uses,
        )

    def test_one_time_template_without_max_uses_gets_one_slot(self):
        assert self.make_template(UsageType.ONE_TIME).slots_per_code() == 1

    def test_explicit_max_uses_is_kept(self):
        assert self.make_template(UsageType.ONE_TIME, max_uses=3).slots_per_code() == 3

    def test_ongoing_template_without_max_uses_is_unlimited(self):
        assert self.make_template(UsageType.ONGOING).slots_per_code() is None
