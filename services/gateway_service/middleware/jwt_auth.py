"""
JWT Authentication middleware.

Verifies the bearer token on every non-public request, confirms the
identity with the user service and hands the caller's identity to
backend services as trusted headers.
"""

from typing import Optional, Sequence, Tuple

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.schemas.response import error_body
from shared.utils.security import SecurityUtils, get_security_utils
from services.gateway_service.utils.user_client import GatewayUserClient

logger = structlog.get_logger(__name__)

USER_ID_HEADER = "x-user-id"
USERNAME_HEADER = "x-username"

# Paths that never require a token
PUBLIC_PATH_PREFIXES: Tuple[str, ...] = (
    "/api/v1/auth/register",
    "/api/v1/auth/login",
    "/api/v1/auth/check-username",
    "/api/v1/auth/check-email",
    "/api/v1/auth/refresh",
    "/health",
    "/api/gateway/health",
)


def is_public_path(path: str, prefixes: Sequence[str] = PUBLIC_PATH_PREFIXES) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def is_preflight(request: Request) -> bool:
    return request.method == "OPTIONS" and "access-control-request-method" in request.headers


def extract_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the ``token`` query parameter"""
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        if token:
            return token

    token = request.query_params.get("token")
    return token.strip() if token and token.strip() else None


def unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body(status.HTTP_401_UNAUTHORIZED, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


class JwtAuthenticationMiddleware(BaseHTTPMiddleware):
    """Gateway authentication filter"""

    def __init__(
        self,
        app,
        user_client: GatewayUserClient,
        security: Optional[SecurityUtils] = None,
        public_prefixes: Sequence[str] = PUBLIC_PATH_PREFIXES,
    ):
        super().__init__(app)
        self.user_client = user_client
        self.security = security
        self.public_prefixes = tuple(public_prefixes)

    @staticmethod
    def _set_identity_headers(request: Request, identity: Optional[Tuple[int, str]]) -> None:
        """Rewrite the ASGI headers: drop client identity headers, optionally inject verified ones"""
        headers = [
            (name, value)
            for name, value in request.scope["headers"]
            if name.lower() not in (USER_ID_HEADER.encode(), USERNAME_HEADER.encode())
        ]

        if identity is not None:
            user_id, username = identity
            headers = [(name, value) for name, value in headers if name.lower() != b"authorization"]
            headers.append((USER_ID_HEADER.encode(), str(user_id).encode()))
            headers.append((USERNAME_HEADER.encode(), username.encode()))

        request.scope["headers"] = headers

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        # Identity headers are only ever set by the gateway
        self._set_identity_headers(request, None)

        if is_preflight(request) or is_public_path(path, self.public_prefixes):
            return await call_next(request)

        token = extract_token(request)
        if token is None:
            logger.warning("Missing authentication token", path=path)
            return unauthorized("Missing authentication token")

        security = self.security or get_security_utils()
        claims = security.get_claims(token)
        if claims is None:
            return unauthorized("Invalid or expired token")

        if not security.is_access_claims(claims):
            logger.warning("Non-access token rejected", token_type=claims.get("type"), path=path)
            return unauthorized("Access token required")

        user_id = claims.get("userId")
        username = claims.get("username")
        if isinstance(user_id, bool) or not isinstance(user_id, int) or not isinstance(username, str) or not username:
            logger.warning("Token is missing identity claims", path=path)
            return unauthorized("Invalid token claims")

        if not await self.user_client.validate_user(user_id, username):
            logger.warning("Token user no longer valid", user_id=user_id, path=path)
            return unauthorized("User validation failed")

        self._set_identity_headers(request, (user_id, username))
        logger.debug("Request authenticated", user_id=user_id, path=path)

        return await call_next(request)
