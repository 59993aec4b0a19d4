"""
Database connection for the user service
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from shared.utils.database import DatabaseManager
from services.user_service.config import settings

user_db = DatabaseManager(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    echo=settings.db_echo,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session"""
    async with user_db.get_session() as session:
        yield session
