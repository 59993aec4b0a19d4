"""
User Service HTTP Client
Looks up users in the user service when managing project membership
"""

from typing import Optional

import httpx
import structlog

from shared.schemas.user import UserValidationSchema
from shared.utils.exceptions import BusinessException, ErrorCode
from shared.utils.service_client import ServiceClient

logger = structlog.get_logger(__name__)


class UserServiceClient(ServiceClient):
    """HTTP client for user service lookups"""

    service_name = "user-service"

    async def get_user(self, user_id: int) -> Optional[UserValidationSchema]:
        """
        Resolve a user id

        Returns:
            The user, or None when the user does not exist

        Raises:
            BusinessException: USER_SERVICE_ERROR if the user service cannot answer
        """
        try:
            response = await self.request("GET", f"/api/v1/users/validate/{user_id}")
            response.raise_for_status()
            body = response.json()
            if body.get("code") != ErrorCode.SUCCESS.code or not body.get("data"):
                raise ValueError(f"unexpected response code {body.get('code')}")
            user = UserValidationSchema.model_validate(body["data"])
        except (httpx.HTTPError, ValueError) as e:
            logger.error("User service lookup failed", user_id=user_id, error=str(e))
            raise BusinessException(ErrorCode.USER_SERVICE_ERROR)

        return user if user.exists else None
