"""
User Service client Tests
"""

import httpx
import pytest

from shared.schemas.response import error_body, success
from shared.utils.exceptions import BusinessException, ErrorCode
from services.project_service.utils.user_client import UserServiceClient


def client_with(handler) -> UserServiceClient:
    return UserServiceClient("http://user-service.test", transport=httpx.MockTransport(handler))


class TestUserServiceClient:
    @pytest.mark.asyncio
    async def test_existing_user(self):
        def handler(request):
            assert request.url.path == "/api/v1/users/validate/5"
            return httpx.Response(200, json=success(
                {"user_id": 5, "username": "eve", "email": "eve@example.com", "exists": True}
            ))

        client = client_with(handler)
        await client.start()
        try:
            user = await client.get_user(5)
        finally:
            await client.stop()

        assert user.username == "eve"

    @pytest.mark.asyncio
    async def test_missing_user(self):
        def handler(request):
            return httpx.Response(200, json=success({"exists": False}))

        assert await client_with(handler).get_user(5) is None

    @pytest.mark.asyncio
    async def test_error_envelope(self):
        def handler(request):
            return httpx.Response(200, json=error_body(10001, "boom"))

        with pytest.raises(BusinessException) as exc_info:
            await client_with(handler).get_user(5)
        assert exc_info.value.error_code is ErrorCode.USER_SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BusinessException) as exc_info:
            await client_with(handler).get_user(5)
        assert exc_info.value.error_code is ErrorCode.USER_SERVICE_ERROR
