"""
Database engine and session dependency.

The service only reads the host CMS tables, so sessions are never committed.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from attachments_inspector.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.database_url, echo=settings.debug, pool_pre_ping=True)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    """Yield one read-only session per request."""
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception:
            logger.exception("Database session error")
            await db.rollback()
            raise
