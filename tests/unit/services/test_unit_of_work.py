"""Unit tests for SqlAlchemyUnitOfWork"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork


@pytest.mark.asyncio
class TestSqlAlchemyUnitOfWork:

    async def test_commit_then_exit_rolls_back_nothing_pending(self):
        # Arrange
        session = MagicMock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()

        # Act
        async with SqlAlchemyUnitOfWork(session) as uow:
            await uow.commit()

        # Assert
        session.commit.assert_awaited_once()
        session.rollback.assert_awaited_once()

    async def test_exception_inside_context_rolls_back_and_propagates(self):
        # Arrange
        session = MagicMock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()

        # Act & Assert
        with pytest.raises(RuntimeError):
            async with SqlAlchemyUnitOfWork(session):
                raise RuntimeError("boom")

        session.commit.assert_not_awaited()
        session.rollback.assert_awaited_once()
