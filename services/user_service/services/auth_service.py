"""
Authentication Service
Registration, login, token refresh and identity checks for the gateway
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.schemas.user import (
    UserCreateSchema, UserLoginSchema, UserResponseSchema, LoginResponseSchema, UserStatus,
)
from shared.utils.exceptions import BusinessException, ErrorCode
from shared.utils.security import REFRESH_TOKEN_TYPE, get_security_utils
from services.user_service.models.user import User
from services.user_service.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for user authentication"""

    @staticmethod
    async def register(db: AsyncSession, data: UserCreateSchema) -> User:
        """Create an account after checking password confirmation and uniqueness"""
        if data.password != data.confirm_password:
            raise BusinessException(ErrorCode.PASSWORD_MISMATCH)

        repository = UserRepository(db)
        if await repository.exists_by_username(data.username):
            raise BusinessException(ErrorCode.USERNAME_ALREADY_EXISTS)
        if await repository.exists_by_email(data.email):
            raise BusinessException(ErrorCode.EMAIL_ALREADY_EXISTS)

        nickname = data.nickname.strip() if data.nickname and data.nickname.strip() else data.username
        user = User(
            username=data.username,
            email=data.email,
            password_hash=get_security_utils().hash_password(data.password),
            nickname=nickname,
            status=UserStatus.ACTIVE.value,
        )

        try:
            await repository.add(user)
            await db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            await db.rollback()
            if await repository.exists_by_username(data.username):
                raise BusinessException(ErrorCode.USERNAME_ALREADY_EXISTS)
            raise BusinessException(ErrorCode.EMAIL_ALREADY_EXISTS)

        logger.info("User registered", user_id=user.id, username=user.username)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLoginSchema) -> LoginResponseSchema:
        """Authenticate by username or email and issue a token pair"""
        user = await UserRepository(db).get_by_username_or_email(data.login_id)

        security = get_security_utils()
        if user is None or not security.verify_password(data.password, user.password_hash):
            logger.warning("Login failed", login_id=data.login_id)
            raise BusinessException(ErrorCode.INVALID_CREDENTIALS)

        if not user.is_active:
            raise BusinessException(ErrorCode.USER_DISABLED)

        user.last_login_at = datetime.now(timezone.utc)
        await db.commit()

        logger.info("User logged in", user_id=user.id)
        return AuthService.create_tokens_for_user(user)

    @staticmethod
    async def refresh(db: AsyncSession, refresh_token: str) -> LoginResponseSchema:
        """Exchange a refresh token for a new token pair"""
        security = get_security_utils()
        claims = security.get_claims(refresh_token)
        if claims is None:
            raise BusinessException(ErrorCode.TOKEN_INVALID)
        if claims.get("type") != REFRESH_TOKEN_TYPE:
            raise BusinessException(ErrorCode.TOKEN_INVALID, "Not a refresh token")

        user_id = claims.get("userId")
        user = await UserRepository(db).get_by_id(user_id) if isinstance(user_id, int) else None
        if user is None or user.username != claims.get("username"):
            raise BusinessException(ErrorCode.TOKEN_INVALID)
        if not user.is_active:
            raise BusinessException(ErrorCode.USER_DISABLED)

        return AuthService.create_tokens_for_user(user)

    @staticmethod
    def create_tokens_for_user(user: User) -> LoginResponseSchema:
        """Create access and refresh tokens for user"""
        security = get_security_utils()
        return LoginResponseSchema(
            token=security.generate_token(user.id, user.username),
            refresh_token=security.generate_refresh_token(user.id, user.username),
            expires_in=security.expiration,
            user_info=UserResponseSchema.model_validate(user),
        )

    @staticmethod
    async def is_username_available(db: AsyncSession, username: str) -> bool:
        return not await UserRepository(db).exists_by_username(username)

    @staticmethod
    async def is_email_available(db: AsyncSession, email: str) -> bool:
        return not await UserRepository(db).exists_by_email(email)

    @staticmethod
    async def validate_user(db: AsyncSession, user_id: int, username: str) -> bool:
        """True when the id resolves to an active account with this username"""
        user: Optional[User] = await UserRepository(db).get_by_id(user_id)
        valid = user is not None and user.is_active and user.username == username
        if not valid:
            logger.info("User validation failed", user_id=user_id, username=username)
        return valid
