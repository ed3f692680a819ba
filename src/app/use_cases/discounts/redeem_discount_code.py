"""RedeemDiscountCode Use Case

Consumes one use of a discount code for a payment.
"""

from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.repositories.discount_code_repository import DiscountCodeRepository
from src.app.repositories.discount_code_usage_repository import DiscountCodeUsageRepository
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.errors import (
    CODE_EXHAUSTED,
    CODE_EXPIRED,
    CODE_INACTIVE,
    CODE_NOT_FOUND,
    CODE_NOT_OWNED,
    PAYMENT_ALREADY_REDEEMED,
    TRANSIENT_STORAGE_FAILURE,
    failure,
)
from src.domain.base import utc_now
from src.domain.discount_code import DiscountCode
from src.domain.discount_code_usage import DiscountCodeUsage
from src.domain.discount_template import DiscountScope
from src.domain.eligibility_clock import is_within_window
from .dtos import RedeemDiscountCodeCommandDTO, RedemptionResponseDTO


def is_owned_by(code: DiscountCode, subject_id: str, family_id) -> bool:
    if code.owner_subject_id == subject_id:
        return True
    return (
        code.scope == DiscountScope.PER_FAMILY
        and code.owner_family_id is not None
        and code.owner_family_id == family_id
    )


class RedeemDiscountCode:
    """
    Use Case: Redeem a discount code against a payment

    Business Rules:
    1. Idempotency: one usage per payment_id; repeating returns the same usage
    2. The code must be active and inside its validity window
    3. Per-subject codes are redeemable by their owner only; per-family codes
       by any subject of the owner's family
    4. The use is reserved with a conditional UPDATE (current_uses < max_uses),
       so concurrent redemptions never exceed max_uses

    Flow:
    1. Check idempotency
    2. Load and validate the code
    3. Reserve a use
    4. Record the usage
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        code_repo: DiscountCodeRepository,
        usage_repo: DiscountCodeUsageRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.code_repo = code_repo
        self.usage_repo = usage_repo
        self.clock = clock

    async def execute(self, command: RedeemDiscountCodeCommandDTO) -> Result[RedemptionResponseDTO]:
        try:
            # Step 1: Idempotency
            existing = await self.usage_repo.get_by_payment_id(command.payment_id)
            if existing is not None:
                return await self._existing_usage(existing, command)

            # Step 2: Load and validate
            code = await self.code_repo.get_by_code(command.code)
            if code is None:
                return Return.err(Error(code=CODE_NOT_FOUND, message=f"Discount code {command.code} not found"))

            if not code.is_active:
                return Return.err(Error(code=CODE_INACTIVE, message=f"Discount code {code.code} is inactive"))

            if not is_within_window(self.clock(), code.valid_from, code.valid_until):
                return Return.err(Error(code=CODE_EXPIRED, message=f"Discount code {code.code} is not valid now"))

            if not is_owned_by(code, command.subject_id, command.family_id):
                return Return.err(
                    Error(
                        code=CODE_NOT_OWNED,
                        message=f"Discount code {code.code} cannot be used by subject {command.subject_id}",
                    )
                )

            code_id, code_value, max_uses = code.id, code.code, code.max_uses

            # Step 3: Reserve a use atomically
            if not await self.code_repo.increment_uses(code_id):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=CODE_EXHAUSTED,
                        message=f"Discount code {code_value} has no uses left",
                    )
                )

            # Step 4: Record the usage
            usage = await self.usage_repo.create(
                DiscountCodeUsage(
                    code_id=code_id,
                    payment_id=command.payment_id,
                    subject_id=command.subject_id,
                    family_id=command.family_id,
                )
            )
            if usage is None:
                # a concurrent call recorded this payment first; our increment was rolled back
                existing = await self.usage_repo.get_by_payment_id(command.payment_id)
                if existing is None:
                    # the conflicting usage was compensated before it could be read
                    return Return.err(
                        Error(
                            code=TRANSIENT_STORAGE_FAILURE,
                            message=f"Concurrent redemption for payment {command.payment_id} changed, retry",
                        )
                    )
                return await self._existing_usage(existing, command)

            usage_id, used_at = usage.id, usage.used_at

            # Step 5: Commit
            await self.uow.commit()

            refreshed = await self.code_repo.get_by_id(code_id)
            return Return.ok(
                RedemptionResponseDTO(
                    code_id=code_id,
                    code=code_value,
                    payment_id=command.payment_id,
                    subject_id=command.subject_id,
                    current_uses=refreshed.current_uses,
                    max_uses=max_uses,
                    usage_id=usage_id,
                    used_at=used_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(failure("REDEEM_DISCOUNT_CODE_FAILED", "Failed to redeem discount code", e))

    async def _existing_usage(
        self, usage: DiscountCodeUsage, command: RedeemDiscountCodeCommandDTO
    ) -> Result[RedemptionResponseDTO]:
        code = await self.code_repo.get_by_id(usage.code_id)
        if code is None or code.code != command.code.strip().upper():
            return Return.err(
                Error(
                    code=PAYMENT_ALREADY_REDEEMED,
                    message=f"Payment {command.payment_id} already used a different discount code",
                )
            )
        return Return.ok(
            RedemptionResponseDTO(
                usage_id=usage.id,
                code_id=code.id,
                code=code.code,
                payment_id=usage.payment_id,
                subject_id=usage.subject_id,
                current_uses=code.current_uses,
                max_uses=code.max_uses,
                already_recorded=True,
                used_at=usage.used_at,
            )
        )
