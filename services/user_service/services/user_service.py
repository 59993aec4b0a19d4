"""
User Service
Profile management and service-to-service user lookups
"""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.schemas.user import UserUpdateSchema, UserValidationSchema
from shared.utils.exceptions import BusinessException, ErrorCode
from services.user_service.models.user import User
from services.user_service.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user profile operations"""

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> User:
        user = await UserRepository(db).get_by_id(user_id)
        if user is None:
            raise BusinessException(ErrorCode.USER_NOT_FOUND)
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: int, data: UserUpdateSchema) -> User:
        """
        Apply a partial profile update

        A blank nickname is ignored, an avatar URL is trimmed and may be
        cleared with an empty string, and a changed email must be unused.
        """
        repository = UserRepository(db)
        user = await repository.get_by_id(user_id)
        if user is None:
            raise BusinessException(ErrorCode.USER_NOT_FOUND)

        if data.email is not None and data.email != user.email:
            if await repository.exists_by_email(data.email):
                raise BusinessException(ErrorCode.EMAIL_ALREADY_USED)
            user.email = data.email

        if data.nickname is not None and data.nickname.strip():
            user.nickname = data.nickname.strip()

        if data.avatar_url is not None:
            user.avatar_url = data.avatar_url.strip()

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BusinessException(ErrorCode.EMAIL_ALREADY_USED)

        await db.refresh(user)
        logger.info("Profile updated", user_id=user_id)
        return user

    @staticmethod
    async def validate_by_id(db: AsyncSession, user_id: int) -> UserValidationSchema:
        user = await UserRepository(db).get_by_id(user_id)
        if user is None:
            return UserValidationSchema.not_found()
        return UserValidationSchema.found(user.id, user.username, user.email)

    @staticmethod
    async def validate_by_username(db: AsyncSession, username: str) -> UserValidationSchema:
        user = await UserRepository(db).get_by_username(username)
        if user is None:
            return UserValidationSchema.not_found()
        return UserValidationSchema.found(user.id, user.username, user.email)
