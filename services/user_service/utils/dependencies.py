"""
FastAPI Dependencies
Database sessions and caller identity
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from shared.utils.exceptions import BusinessException, ErrorCode
from shared.utils.security import get_security_utils
from services.user_service.utils.database import get_db

logger = structlog.get_logger(__name__)


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> int:
    """
    Resolve the authenticated user id

    The gateway injects ``X-User-Id`` after verifying the token. Requests
    that reach the service directly may instead carry a Bearer access token;
    refresh tokens are not accepted.

    Raises:
        BusinessException: UNAUTHORIZED if no identity can be established
    """
    if x_user_id:
        try:
            return int(x_user_id)
        except ValueError:
            logger.warning("Invalid X-User-Id header", value=x_user_id)
            raise BusinessException(ErrorCode.UNAUTHORIZED)

    if authorization and authorization.startswith("Bearer "):
        user_id = get_security_utils().get_user_id(authorization[len("Bearer "):])
        if user_id is not None:
            return user_id

    raise BusinessException(ErrorCode.UNAUTHORIZED)


# Type aliases for cleaner dependency injection
DatabaseDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
