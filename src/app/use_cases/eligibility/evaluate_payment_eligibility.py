"""EvaluatePaymentEligibility Use Case

Reports whether a subject is on trial, covered by a recent payment, or expired.
"""

from datetime import date
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.payment_history_service import PaymentHistoryService
from src.app.services.subject_directory import SubjectDirectory
from src.app.use_cases.errors import SUBJECT_NOT_FOUND, failure
from src.domain.eligibility_clock import today
from src.domain.payment_eligibility import PaymentEligibilityEvaluator
from .dtos import PaymentEligibilityQueryDTO, PaymentEligibilityResponseDTO


class EvaluatePaymentEligibility:
    """
    Use Case: Evaluate payment-based eligibility

    Business Rules:
    1. Only successful payments of a plan kind with a configured window count
    2. No qualifying payment: eligible, reason Trial
    3. Window check is inclusive (a payment exactly validity_days old is valid)
    4. Nothing is stored; the status is recomputed on every call

    Flow:
    1. Check the subject exists
    2. Load successful payments
    3. Evaluate against the configured windows
    """

    def __init__(
        self,
        subject_directory: SubjectDirectory,
        payment_history: PaymentHistoryService,
        evaluator: PaymentEligibilityEvaluator,
        clock: Callable[[], date] = today,
    ):
        self.subject_directory = subject_directory
        self.payment_history = payment_history
        self.evaluator = evaluator
        self.clock = clock

    async def execute(self, query: PaymentEligibilityQueryDTO) -> Result[PaymentEligibilityResponseDTO]:
        try:
            # Step 1: Subject must exist
            profile = await self.subject_directory.get_profile(query.subject_id)
            if profile is None:
                return Return.err(
                    Error(
                        code=SUBJECT_NOT_FOUND,
                        message=f"Subject {query.subject_id} not found",
                    )
                )

            # Step 2: Load payment history
            payments = await self.payment_history.get_successful_payments(query.subject_id)

            # Step 3: Evaluate
            evaluated_on = query.as_of or self.clock()
            status = self.evaluator.evaluate(payments, evaluated_on)

            return Return.ok(
                PaymentEligibilityResponseDTO(
                    subject_id=query.subject_id,
                    eligible=status.eligible,
                    reason=status.reason.value,
                    last_payment_date=status.last_payment_date,
                    plan_kind=status.plan_kind.value if status.plan_kind else None,
                    evaluated_on=evaluated_on,
                )
            )

        except Exception as e:
            return Return.err(
                failure("EVALUATE_PAYMENT_ELIGIBILITY_FAILED", "Failed to evaluate payment eligibility", e)
            )
