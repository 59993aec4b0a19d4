"""
User repository
"""

from typing import Optional

from sqlalchemy import select, or_

from shared.utils.repository import BaseRepository
from services.user_service.models.user import User


class UserRepository(BaseRepository[User]):
    """Data access for the users table"""

    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username_or_email(self, login_id: str) -> Optional[User]:
        """Login lookup; a username match wins over an email match"""
        result = await self.session.execute(
            select(User).where(or_(User.username == login_id, User.email == login_id.lower()))
        )
        users = list(result.scalars().all())
        for user in users:
            if user.username == login_id:
                return user
        return users[0] if users else None

    async def exists_by_username(self, username: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.username == username).limit(1))
        return result.first() is not None

    async def exists_by_email(self, email: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.email == email.lower()).limit(1))
        return result.first() is not None
