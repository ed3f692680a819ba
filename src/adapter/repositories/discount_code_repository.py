"""SQLAlchemy implementation of DiscountCodeRepository

current_uses is only modified by single UPDATE statements evaluated by the
database, never by read-modify-write in Python.
"""

from typing import Optional
from sqlalchemy import case, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.discount_code_repository import DiscountCodeRepository
from src.domain.base import utc_now
from src.domain.discount_code import DiscountCode


class SqlAlchemyDiscountCodeRepository(DiscountCodeRepository):
    """
    SQLAlchemy implementation of DiscountCodeRepository

    Features:
    - Conditional increment (is_active AND current_uses < max_uses)
    - Decrement floored at zero
    - Reads use populate_existing so counters are never stale
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, code: DiscountCode) -> DiscountCode:
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    async def get_by_id(self, code_id: str) -> Optional[DiscountCode]:
        stmt = (
            select(DiscountCode)
            .where(DiscountCode.id == code_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Optional[DiscountCode]:
        stmt = (
            select(DiscountCode)
            .where(DiscountCode.code == code.strip().upper())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def code_exists(self, code: str) -> bool:
        stmt = select(func.count()).select_from(DiscountCode).where(DiscountCode.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def increment_uses(self, code_id: str) -> bool:
        """
        Atomically reserve one use

        Args:
            code_id: Code identifier

        Returns:
            True if exactly one row was updated
        """
        stmt = (
            update(DiscountCode)
            .where(DiscountCode.id == code_id)
            .where(DiscountCode.is_active == True)  # noqa: E712
            .where(
                or_(
                    DiscountCode.max_uses.is_(None),
                    DiscountCode.current_uses < DiscountCode.max_uses,
                )
            )
            .values(current_uses=DiscountCode.current_uses + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def decrement_uses(self, code_id: str) -> None:
        stmt = (
            update(DiscountCode)
            .where(DiscountCode.id == code_id)
            .values(
                current_uses=case(
                    (DiscountCode.current_uses > 0, DiscountCode.current_uses - 1),
                    else_=0,
                ),
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
