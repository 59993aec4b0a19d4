"""
Proxy Routes
Forwards /api/v1/** to the backend that owns the path prefix
"""

import httpx
import structlog
from fastapi import APIRouter, Request

from shared.utils.exceptions import BusinessException, ErrorCode

logger = structlog.get_logger(__name__)

router = APIRouter()

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/api/v1/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(request: Request, path: str):
    """Forward the request to its upstream service"""
    upstream = request.app.state.route_table.resolve(request.url.path)
    if upstream is None:
        raise BusinessException(ErrorCode.RESOURCE_NOT_FOUND)

    try:
        return await upstream.forward(request)
    except httpx.HTTPError as e:
        logger.error("Upstream request failed", service=upstream.service_name, path=request.url.path, error=str(e))
        raise BusinessException(ErrorCode.SERVICE_UNAVAILABLE, f"{upstream.service_name} is unavailable")
