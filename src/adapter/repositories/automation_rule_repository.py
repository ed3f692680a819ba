"""SQLAlchemy implementation of AutomationRuleRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.automation_rule_repository import AutomationRuleRepository
from src.domain.automation_rule import AutomationRule
from src.domain.domain_event import DomainEventKind


class SqlAlchemyAutomationRuleRepository(AutomationRuleRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active_for_kind(self, kind: DomainEventKind) -> list[AutomationRule]:
        stmt = (
            select(AutomationRule)
            .where(AutomationRule.event_kind == kind)
            .where(AutomationRule.is_active == True)  # noqa: E712
            .order_by(AutomationRule.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, rule_id: str) -> Optional[AutomationRule]:
        stmt = select(AutomationRule).where(AutomationRule.id == rule_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, rule: AutomationRule) -> AutomationRule:
        self.session.add(rule)
        await self.session.flush()
        await self.session.refresh(rule)
        return rule
