"""SQL Payment History Service

Reads payments through payment_students, since one family payment can cover
several students.
"""

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.payment_history_service import PaymentHistoryService
from src.domain.payment_eligibility import PaymentRecord, PlanKind
from src.domain.school_records import Payment, PaymentStatus, PaymentStudent, PaymentType

PLAN_KIND_BY_PAYMENT_TYPE = {
    PaymentType.MONTHLY_GROUP: PlanKind.MONTHLY,
    PaymentType.YEARLY_GROUP: PlanKind.YEARLY,
}


class SqlPaymentHistoryService(PaymentHistoryService):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_successful_payments(self, subject_id: str) -> list[PaymentRecord]:
        stmt = (
            select(Payment)
            .join(PaymentStudent, PaymentStudent.payment_id == Payment.id)
            .where(PaymentStudent.student_id == subject_id)
            .where(Payment.status == PaymentStatus.SUCCEEDED)
            .where(Payment.payment_date.is_not(None))
            .order_by(Payment.payment_date.desc())
        )
        result = await self.session.execute(stmt)
        return [
            PaymentRecord(
                subject_id=subject_id,
                payment_id=payment.id,
                occurred_at=payment.payment_date,
                succeeded=True,
                plan_kind=PLAN_KIND_BY_PAYMENT_TYPE.get(payment.type, PlanKind.OTHER),
            )
            for payment in result.scalars().all()
        ]

    async def count_successful_payments(self, subject_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Payment)
            .join(PaymentStudent, PaymentStudent.payment_id == Payment.id)
            .where(PaymentStudent.student_id == subject_id)
            .where(Payment.status == PaymentStatus.SUCCEEDED)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
