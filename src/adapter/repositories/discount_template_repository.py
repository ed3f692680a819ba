"""SQLAlchemy implementation of DiscountTemplateRepository"""

from typing import Iterable, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.discount_template_repository import DiscountTemplateRepository
from src.domain.discount_template import DiscountTemplate


class SqlAlchemyDiscountTemplateRepository(DiscountTemplateRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, template_id: str) -> Optional[DiscountTemplate]:
        stmt = select(DiscountTemplate).where(DiscountTemplate.id == template_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, template_ids: Iterable[str]) -> dict[str, DiscountTemplate]:
        ids = set(template_ids)
        if not ids:
            return {}
        stmt = select(DiscountTemplate).where(DiscountTemplate.id.in_(ids))
        result = await self.session.execute(stmt)
        return {template.id: template for template in result.scalars().all()}
