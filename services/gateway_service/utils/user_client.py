"""
User Service HTTP Client
Confirms that a token's identity still resolves to an active account
"""

from urllib.parse import quote

import structlog

from shared.utils.exceptions import ErrorCode
from shared.utils.service_client import ServiceClient

logger = structlog.get_logger(__name__)


class GatewayUserClient(ServiceClient):
    """HTTP client for the user service's validate-user endpoint"""

    service_name = "user-service"

    # Validation sits on every authenticated request
    READ_TIMEOUT = 5.0

    async def validate_user(self, user_id: int, username: str) -> bool:
        """
        Ask the user service whether the pair is a live account

        Returns:
            True only on an explicit positive answer; any failure is False
        """
        try:
            response = await self.request(
                "GET", f"/api/v1/auth/validate-user/{user_id}/{quote(username, safe='')}"
            )
            if response.status_code != 200:
                logger.warning("User validation rejected", user_id=user_id, status_code=response.status_code)
                return False

            body = response.json()
            return body.get("code") == ErrorCode.SUCCESS.code and body.get("data") is True

        except Exception as e:
            logger.error("User validation call failed", user_id=user_id, error=str(e))
            return False
