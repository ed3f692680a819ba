"""SQLAlchemy implementation of DiscountAssignmentRepository

assign() relies on uq_discount_assignments_rule_event_subject_template; a concurrent
writer that loses the race gets an IntegrityError, which is absorbed here.
"""

import logging
from typing import Optional
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.discount_assignment_repository import DiscountAssignmentRepository
from src.domain.discount_assignment import DiscountAssignment

logger = logging.getLogger(__name__)


class SqlAlchemyDiscountAssignmentRepository(DiscountAssignmentRepository):
    """
    SQLAlchemy implementation of DiscountAssignmentRepository

    Features:
    - Insert-or-conflict on (rule_id, event_id, subject_id, template_id)
    - Conflict rolls back the pending transaction (discarding the loser's code)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def assign(self, assignment: DiscountAssignment) -> Optional[DiscountAssignment]:
        """
        Insert an assignment or report the existing one

        Args:
            assignment: DiscountAssignment to persist

        Returns:
            Created assignment, or None on uniqueness conflict
        """
        try:
            self.session.add(assignment)
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.info(
                f"Assignment already exists for rule={assignment.rule_id} "
                f"event={assignment.event_id} subject={assignment.subject_id} "
                f"template={assignment.template_id}"
            )
            return None

        await self.session.refresh(assignment)
        return assignment

    async def count_for_subject(self, rule_id: str, subject_id: str) -> int:
        stmt = (
            select(func.count(func.distinct(DiscountAssignment.event_id)))
            .where(DiscountAssignment.rule_id == rule_id)
            .where(DiscountAssignment.subject_id == subject_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete_for_code(self, code_id: str) -> int:
        stmt = delete(DiscountAssignment).where(DiscountAssignment.code_id == code_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def list_assignments(
        self,
        subject_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DiscountAssignment]:
        stmt = select(DiscountAssignment)
        if subject_id is not None:
            stmt = stmt.where(DiscountAssignment.subject_id == subject_id)
        stmt = stmt.order_by(DiscountAssignment.assigned_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
