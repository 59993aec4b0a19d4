"""
Health check routes for the gateway
"""

import structlog
from fastapi import APIRouter, Request

from shared.schemas.response import success

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return success({
        "service": "gateway",
        "status": "healthy",
        "version": "1.0.0",
    })


@router.get("/api/gateway/health")
async def gateway_health_check(request: Request):
    """Gateway health with the reachability of each upstream"""
    route_table = request.app.state.route_table
    upstreams = {}
    for name, upstream in route_table.upstreams.items():
        try:
            response = await upstream.request("GET", "/health")
            upstreams[name] = "healthy" if response.status_code == 200 else "unhealthy"
        except Exception as e:
            logger.warning("Upstream health check failed", service=name, error=str(e))
            upstreams[name] = "unavailable"

    return success({
        "service": "gateway",
        "status": "healthy" if all(state == "healthy" for state in upstreams.values()) else "degraded",
        "routes": route_table.prefixes,
        "upstreams": upstreams,
    })
