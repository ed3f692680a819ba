"""SQLAlchemy implementation of DiscountCodeUsageRepository"""

from typing import Optional
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.discount_code_usage_repository import DiscountCodeUsageRepository
from src.domain.discount_code_usage import DiscountCodeUsage


class SqlAlchemyDiscountCodeUsageRepository(DiscountCodeUsageRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, usage: DiscountCodeUsage) -> Optional[DiscountCodeUsage]:
        try:
            self.session.add(usage)
            await self.session.flush()
        except IntegrityError:
            # payment_id is unique
            await self.session.rollback()
            return None

        await self.session.refresh(usage)
        return usage

    async def get_by_payment_id(self, payment_id: str) -> Optional[DiscountCodeUsage]:
        stmt = select(DiscountCodeUsage).where(DiscountCodeUsage.payment_id == payment_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, usage_id: str) -> int:
        stmt = delete(DiscountCodeUsage).where(DiscountCodeUsage.id == usage_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def count_for_code(self, code_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(DiscountCodeUsage)
            .where(DiscountCodeUsage.code_id == code_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
