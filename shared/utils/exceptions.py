"""
Error handling for Codivio services

Numeric error-code taxonomy, the business exception raised from service
code, and the FastAPI exception handlers that render both into the
uniform response envelope.

Code layout XYZAB:
    X  - level (1 system, 2 business)
    YZ - area (00 common, 01 user, 02/03 project)
    AB - sequence
"""

from enum import Enum
from typing import Optional, Any, Dict

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.schemas.response import error_body

logger = structlog.get_logger(__name__)


class ErrorCode(Enum):
    """Error code enumeration: (code, message, http status)"""

    SUCCESS = (200, "Success", status.HTTP_200_OK)

    # System errors (1xxxx)
    SYSTEM_ERROR = (10001, "Internal system error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    DATABASE_ERROR = (10002, "Database operation failed", status.HTTP_500_INTERNAL_SERVER_ERROR)
    NETWORK_ERROR = (10003, "Network connection error", status.HTTP_502_BAD_GATEWAY)
    SERVICE_UNAVAILABLE = (10004, "Service unavailable", status.HTTP_503_SERVICE_UNAVAILABLE)
    USER_SERVICE_ERROR = (10101, "User service error", status.HTTP_502_BAD_GATEWAY)

    # Parameter validation (200xx)
    INVALID_PARAMETER = (20001, "Parameter validation failed", status.HTTP_400_BAD_REQUEST)
    MISSING_REQUIRED_PARAMETER = (20002, "Missing required parameter", status.HTTP_400_BAD_REQUEST)
    RESOURCE_NOT_FOUND = (20003, "Resource not found", status.HTTP_404_NOT_FOUND)

    # Authentication and authorization (201xx)
    UNAUTHORIZED = (20101, "Unauthorized access", status.HTTP_401_UNAUTHORIZED)
    TOKEN_INVALID = (20102, "Invalid access token", status.HTTP_401_UNAUTHORIZED)
    TOKEN_EXPIRED = (20103, "Access token has expired", status.HTTP_401_UNAUTHORIZED)
    PERMISSION_DENIED = (20104, "Permission denied", status.HTTP_403_FORBIDDEN)

    # User registration (2021x)
    USERNAME_ALREADY_EXISTS = (20211, "Username already exists", status.HTTP_409_CONFLICT)
    EMAIL_ALREADY_EXISTS = (20212, "Email address already exists", status.HTTP_409_CONFLICT)
    PASSWORD_MISMATCH = (20213, "Password and confirmation do not match", status.HTTP_400_BAD_REQUEST)

    # User login (2022x)
    USER_NOT_FOUND = (20221, "User not found", status.HTTP_404_NOT_FOUND)
    INVALID_CREDENTIALS = (20222, "Invalid username or password", status.HTTP_401_UNAUTHORIZED)
    USER_DISABLED = (20223, "User account is disabled", status.HTTP_403_FORBIDDEN)

    # User profile (2023x)
    EMAIL_ALREADY_USED = (20232, "Email is already used by another user", status.HTTP_409_CONFLICT)

    # Projects (203xx)
    PROJECT_NOT_FOUND = (20301, "Project not found", status.HTTP_404_NOT_FOUND)
    PROJECT_ACCESS_DENIED = (20302, "No access to this project", status.HTTP_403_FORBIDDEN)
    PROJECT_NAME_ALREADY_EXISTS = (20303, "Project name already exists", status.HTTP_409_CONFLICT)
    PROJECT_MEMBER_NOT_FOUND = (20304, "Project member not found", status.HTTP_404_NOT_FOUND)
    MEMBER_ALREADY_EXISTS = (20305, "User is already a project member", status.HTTP_409_CONFLICT)
    CANNOT_ADD_OWNER_ROLE = (20307, "The owner role cannot be assigned", status.HTTP_400_BAD_REQUEST)
    CANNOT_REMOVE_OWNER = (20308, "The project owner cannot be removed", status.HTTP_400_BAD_REQUEST)
    CANNOT_MODIFY_OWNER_ROLE = (20309, "The project owner's role cannot be changed", status.HTTP_400_BAD_REQUEST)

    def __init__(self, code: int, message: str, http_status: int):
        self.code = code
        self.message = message
        self.http_status = http_status

    @classmethod
    def from_code(cls, code: int) -> "ErrorCode":
        """Look up an error code by number, falling back to SYSTEM_ERROR"""
        for error_code in cls:
            if error_code.code == code:
                return error_code
        return cls.SYSTEM_ERROR

    @property
    def is_system_error(self) -> bool:
        return 10000 <= self.code < 20000

    @property
    def is_business_error(self) -> bool:
        return 20000 <= self.code < 30000


class BusinessException(Exception):
    """Exception raised by service code for a known business error"""

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None, data: Any = None):
        self.error_code = error_code
        self.message = message or error_code.message
        self.data = data
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return self.error_code.code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a response envelope"""
        return error_body(self.code, self.message, self.data)


async def business_exception_handler(request: Request, exc: BusinessException) -> JSONResponse:
    logger.warning("Business error", code=exc.code, message=exc.message, path=request.url.path)
    return JSONResponse(status_code=exc.error_code.http_status, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Aggregate field-level validation messages into the envelope data"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        errors.setdefault(field, error.get("msg", "Invalid value"))

    logger.warning("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ErrorCode.INVALID_PARAMETER.code, ErrorCode.INVALID_PARAMETER.message, errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorCode.SYSTEM_ERROR.code, ErrorCode.SYSTEM_ERROR.message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the shared exception handlers on an application"""
    app.add_exception_handler(BusinessException, business_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
