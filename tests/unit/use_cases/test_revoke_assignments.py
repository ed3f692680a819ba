"""Unit tests for RevokeAssignmentsForPayment use case

Tests cover:
- Only pending -> failed compensates
- Usage delete row count guards exactly-once compensation
- Assignment deleted only once the code has no usages left
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.discounts import RevokeAssignmentsCommandDTO, RevokeAssignmentsForPayment
from src.domain.discount_code_usage import DiscountCodeUsage
from src.domain.school_records import PaymentStatus


@pytest.fixture
def mock_usage_repo():
    repo = MagicMock()
    repo.get_by_payment_id = AsyncMock(
        return_value=DiscountCodeUsage(
            id="usage_1", code_id="code_1", payment_id="pay_1", subject_id="student_1",
            used_at=datetime(2024, 5, 1),
        )
    )
    repo.delete_by_id = AsyncMock(return_value=1)
    repo.count_for_code = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_code_repo():
    repo = MagicMock()
    repo.decrement_uses = AsyncMock()
    return repo


@pytest.fixture
def mock_assignment_repo():
    repo = MagicMock()
    repo.delete_for_code = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def use_case(mock_uow, mock_usage_repo, mock_code_repo, mock_assignment_repo):
    return RevokeAssignmentsForPayment(
        uow=mock_uow,
        usage_repo=mock_usage_repo,
        code_repo=mock_code_repo,
        assignment_repo=mock_assignment_repo,
    )


def failed_payment(payment_id="pay_1"):
    return RevokeAssignmentsCommandDTO(
        payment_id=payment_id,
        previous_status=PaymentStatus.PENDING,
        new_status=PaymentStatus.FAILED,
    )


@pytest.mark.asyncio
class TestRevokeAssignments:

    async def test_pending_to_failed_compensates(
        self, use_case, mock_uow, mock_usage_repo, mock_code_repo, mock_assignment_repo
    ):
        result = await use_case.execute(failed_payment())

        assert result.value.revoked is True
        assert result.value.code_id == "code_1"
        assert result.value.assignments_deleted == 1
        mock_usage_repo.delete_by_id.assert_called_once_with("usage_1")
        mock_code_repo.decrement_uses.assert_called_once_with("code_1")
        mock_assignment_repo.delete_for_code.assert_called_once_with("code_1")
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize(
        "previous,new",
        [
            (PaymentStatus.PENDING, PaymentStatus.SUCCEEDED),
            (PaymentStatus.SUCCEEDED, PaymentStatus.FAILED),
            (PaymentStatus.FAILED, PaymentStatus.PENDING),
        ],
    )
    async def test_other_transitions_do_nothing(self, use_case, mock_usage_repo, previous, new):
        result = await use_case.execute(
            RevokeAssignmentsCommandDTO(payment_id="pay_1", previous_status=previous, new_status=new)
        )

        assert result.value.revoked is False
        mock_usage_repo.get_by_payment_id.assert_not_called()

    async def test_payment_without_code(self, use_case, mock_usage_repo, mock_code_repo):
        mock_usage_repo.get_by_payment_id = AsyncMock(return_value=None)

        result = await use_case.execute(failed_payment())

        assert result.value.revoked is False
        mock_code_repo.decrement_uses.assert_not_called()

    async def test_lost_delete_race_does_not_decrement(self, use_case, mock_uow, mock_usage_repo, mock_code_repo):
        """
        Given: Another caller already deleted the usage row
        When: Compensation runs again for the same payment
        Then: Nothing is decremented
        """
        mock_usage_repo.delete_by_id = AsyncMock(return_value=0)

        result = await use_case.execute(failed_payment())

        assert result.value.revoked is False
        mock_code_repo.decrement_uses.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_assignment_kept_while_other_usages_remain(
        self, use_case, mock_usage_repo, mock_assignment_repo
    ):
        mock_usage_repo.count_for_code = AsyncMock(return_value=2)

        result = await use_case.execute(failed_payment())

        assert result.value.revoked is True
        assert result.value.assignments_deleted == 0
        mock_assignment_repo.delete_for_code.assert_not_called()

    async def test_storage_failure_rolls_back(self, use_case, mock_uow, mock_code_repo):
        mock_code_repo.decrement_uses = AsyncMock(side_effect=RuntimeError("deadlock"))

        result = await use_case.execute(failed_payment())

        assert result.error.code == "REVOKE_ASSIGNMENTS_FAILED"
        mock_uow.rollback.assert_called_once()
