"""Unit tests for EvaluatePaymentEligibility use case"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from src.app.services.subject_directory import SubjectProfile
from src.app.use_cases.eligibility import EvaluatePaymentEligibility, PaymentEligibilityQueryDTO
from src.domain.payment_eligibility import (
    PaymentEligibilityEvaluator,
    PaymentRecord,
    PlanKind,
    default_windows,
)


@pytest.fixture
def mock_subject_directory():
    directory = MagicMock()
    directory.get_profile = AsyncMock(
        return_value=SubjectProfile(subject_id="student_1", family_id="family_1", birth_date=None)
    )
    return directory


@pytest.fixture
def mock_payment_history():
    return MagicMock()


@pytest.fixture
def use_case(mock_subject_directory, mock_payment_history):
    return EvaluatePaymentEligibility(
        subject_directory=mock_subject_directory,
        payment_history=mock_payment_history,
        evaluator=PaymentEligibilityEvaluator(default_windows()),
        clock=lambda: date(2024, 2, 10),
    )


@pytest.mark.asyncio
class TestEvaluatePaymentEligibility:

    async def test_expired_monthly_payment(self, use_case, mock_payment_history):
        """
        Given: A monthly payment made 40 days before the injected clock
        When: Eligibility is evaluated without as_of
        Then: Expired, evaluated on the clock's date
        """
        # Arrange
        mock_payment_history.get_successful_payments = AsyncMock(
            return_value=[
                PaymentRecord(
                    subject_id="student_1",
                    payment_id="pay_1",
                    occurred_at=date(2024, 1, 1),
                    succeeded=True,
                    plan_kind=PlanKind.MONTHLY,
                )
            ]
        )

        # Act
        result = await use_case.execute(PaymentEligibilityQueryDTO(subject_id="student_1"))

        # Assert
        assert result.is_ok()
        assert result.value.eligible is False
        assert result.value.reason == "Expired"
        assert result.value.last_payment_date == date(2024, 1, 1)
        assert result.value.plan_kind == "monthly"
        assert result.value.evaluated_on == date(2024, 2, 10)

    async def test_trial_with_as_of(self, use_case, mock_payment_history):
        mock_payment_history.get_successful_payments = AsyncMock(return_value=[])

        result = await use_case.execute(
            PaymentEligibilityQueryDTO(subject_id="student_1", as_of=date(2023, 1, 1))
        )

        assert result.value.reason == "Trial"
        assert result.value.eligible is True
        assert result.value.evaluated_on == date(2023, 1, 1)

    async def test_unknown_subject(self, use_case, mock_subject_directory, mock_payment_history):
        mock_subject_directory.get_profile = AsyncMock(return_value=None)
        mock_payment_history.get_successful_payments = AsyncMock()

        result = await use_case.execute(PaymentEligibilityQueryDTO(subject_id="ghost"))

        assert result.is_err()
        assert result.error.code == "SUBJECT_NOT_FOUND"
        mock_payment_history.get_successful_payments.assert_not_called()

    async def test_storage_outage_is_transient(self, use_case, mock_payment_history):
        mock_payment_history.get_successful_payments = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )

        result = await use_case.execute(PaymentEligibilityQueryDTO(subject_id="student_1"))

        assert result.is_err()
        assert result.error.code == "TRANSIENT_STORAGE_FAILURE"

    async def test_unexpected_error(self, use_case, mock_payment_history):
        mock_payment_history.get_successful_payments = AsyncMock(side_effect=RuntimeError("boom"))

        result = await use_case.execute(PaymentEligibilityQueryDTO(subject_id="student_1"))

        assert result.error.code == "EVALUATE_PAYMENT_ELIGIBILITY_FAILED"
        assert "boom" in result.error.reason
