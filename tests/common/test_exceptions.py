"""
Error handling Tests
Error code taxonomy and the envelope produced by the shared handlers
"""

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from shared.utils.exceptions import BusinessException, ErrorCode, register_exception_handlers


class Payload(BaseModel):
    name: str = Field(..., min_length=3)


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/business")
    async def business():
        raise BusinessException(ErrorCode.PROJECT_ACCESS_DENIED)

    @app.get("/custom-message")
    async def custom_message():
        raise BusinessException(ErrorCode.USER_NOT_FOUND, "No such user: 9")

    @app.post("/validate")
    async def validate(payload: Payload):
        return payload

    @app.get("/http")
    async def http():
        raise HTTPException(status_code=418, detail="teapot")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    return app


class TestErrorCode:
    def test_code_ranges(self):
        assert ErrorCode.SYSTEM_ERROR.is_system_error
        assert not ErrorCode.SYSTEM_ERROR.is_business_error
        assert ErrorCode.PROJECT_NOT_FOUND.is_business_error

    def test_from_code(self):
        assert ErrorCode.from_code(20302) is ErrorCode.PROJECT_ACCESS_DENIED
        assert ErrorCode.from_code(99999) is ErrorCode.SYSTEM_ERROR

    def test_codes_are_unique(self):
        codes = [error_code.code for error_code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestExceptionHandlers:
    def test_business_exception(self):
        response = TestClient(build_app()).get("/business")

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == 20302
        assert body["message"] == ErrorCode.PROJECT_ACCESS_DENIED.message
        assert body["data"] is None
        assert isinstance(body["timestamp"], int)

    def test_business_exception_custom_message(self):
        response = TestClient(build_app()).get("/custom-message")

        assert response.status_code == 404
        assert response.json()["message"] == "No such user: 9"

    def test_validation_error_maps_fields(self):
        response = TestClient(build_app()).post("/validate", json={"name": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == ErrorCode.INVALID_PARAMETER.code
        assert "name" in body["data"]

    def test_http_exception(self):
        response = TestClient(build_app()).get("/http")

        assert response.status_code == 418
        assert response.json()["code"] == 418
        assert response.json()["message"] == "teapot"

    def test_unhandled_exception(self):
        client = TestClient(build_app(), raise_server_exceptions=False)
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["code"] == ErrorCode.SYSTEM_ERROR.code
