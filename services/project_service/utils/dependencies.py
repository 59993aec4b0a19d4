"""
FastAPI Dependencies
Database sessions, caller identity and upstream clients
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from shared.utils.exceptions import BusinessException, ErrorCode
from services.project_service.config import settings
from services.project_service.utils.database import get_db
from services.project_service.utils.user_client import UserServiceClient

logger = structlog.get_logger(__name__)

user_client = UserServiceClient(settings.user_service_url)


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> int:
    """
    Resolve the authenticated user id from the gateway-injected header

    Raises:
        BusinessException: UNAUTHORIZED if the header is missing or not numeric
    """
    if not x_user_id:
        raise BusinessException(ErrorCode.UNAUTHORIZED)

    try:
        return int(x_user_id)
    except ValueError:
        logger.warning("Invalid X-User-Id header", value=x_user_id)
        raise BusinessException(ErrorCode.UNAUTHORIZED)


def get_user_client() -> UserServiceClient:
    return user_client


# Type aliases for cleaner dependency injection
DatabaseDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
UserClientDep = Annotated[UserServiceClient, Depends(get_user_client)]
