"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
the SQLAlchemy async session and the generic primary-key operations.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from shared.utils.database import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Subclasses set ``model`` and add domain-specific queries. Repositories
    never commit; the calling service owns the transaction.

    Example:
        class UserRepository(BaseRepository[User]):
            model = User

            async def get_by_username(self, username: str) -> Optional[User]:
                result = await self.session.execute(select(User).where(User.username == username))
                return result.scalar_one_or_none()
    """

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        return await self.session.get(self.model, entity_id)

    async def add(self, entity: T) -> T:
        """Stage an entity and flush so generated keys are populated"""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, entity: T) -> None:
        await self.session.delete(entity)
        await self.session.flush()
