"""Database wiring shared by the API routes"""

import logging
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
import src.domain  # noqa: F401  registers every table on SQLModel.metadata

logger = logging.getLogger(__name__)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables():
    """Create missing tables; existing tables are left untouched"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine():
    await engine.dispose()
