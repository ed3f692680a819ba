"""RevokeAssignmentsForPayment Use Case

Compensation for a payment that failed after consuming a discount code.
"""

import logging
from libs.result import Result, Return
from src.app.repositories.discount_assignment_repository import DiscountAssignmentRepository
from src.app.repositories.discount_code_repository import DiscountCodeRepository
from src.app.repositories.discount_code_usage_repository import DiscountCodeUsageRepository
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import failure
from src.domain.school_records import PaymentStatus
from .dtos import RevocationResponseDTO, RevokeAssignmentsCommandDTO

logger = logging.getLogger(__name__)


class RevokeAssignmentsForPayment:
    """
    Use Case: Undo a code redemption when its payment fails

    Business Rules:
    1. Only the pending -> failed transition compensates
    2. Exactly once per payment: the usage row delete is the guard; a caller
       that deletes nothing does nothing else
    3. current_uses is decremented atomically and never goes below zero
    4. The code's assignment is deleted once the code has no usages left

    Flow:
    1. Check the transition
    2. Find the usage for the payment
    3. Delete it (guard)
    4. Decrement the code's uses
    5. Delete the assignment if the code is unused
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        usage_repo: DiscountCodeUsageRepository,
        code_repo: DiscountCodeRepository,
        assignment_repo: DiscountAssignmentRepository,
    ):
        self.uow = uow
        self.usage_repo = usage_repo
        self.code_repo = code_repo
        self.assignment_repo = assignment_repo

    async def execute(self, command: RevokeAssignmentsCommandDTO) -> Result[RevocationResponseDTO]:
        not_revoked = RevocationResponseDTO(payment_id=command.payment_id, revoked=False)

        # Step 1: Only pending -> failed compensates
        if not (
            command.previous_status == PaymentStatus.PENDING
            and command.new_status == PaymentStatus.FAILED
        ):
            return Return.ok(not_revoked)

        try:
            # Step 2: Usage for this payment
            usage = await self.usage_repo.get_by_payment_id(command.payment_id)
            if usage is None:
                return Return.ok(not_revoked)
            usage_id, code_id = usage.id, usage.code_id

            # Step 3: Exactly-once guard
            if await self.usage_repo.delete_by_id(usage_id) != 1:
                await self.uow.rollback()
                return Return.ok(not_revoked)

            # Step 4: Release the use
            await self.code_repo.decrement_uses(code_id)

            # Step 5: Drop the assignment once nothing uses the code
            assignments_deleted = 0
            if await self.usage_repo.count_for_code(code_id) == 0:
                assignments_deleted = await self.assignment_repo.delete_for_code(code_id)

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Revoked redemption of code {code_id} for failed payment {command.payment_id} "
                f"({assignments_deleted} assignment(s) deleted)"
            )
            return Return.ok(
                RevocationResponseDTO(
                    payment_id=command.payment_id,
                    revoked=True,
                    code_id=code_id,
                    assignments_deleted=assignments_deleted,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                failure("REVOKE_ASSIGNMENTS_FAILED", "Failed to revoke discount assignments", e)
            )
