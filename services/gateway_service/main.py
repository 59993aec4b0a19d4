"""
Gateway Service - Main Application
Single ingress: authenticates requests and routes them to backend services
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from shared.utils.exceptions import register_exception_handlers
from shared.utils.logger import init_logging, log_requests
from services.gateway_service.config import settings
from services.gateway_service.middleware.jwt_auth import JwtAuthenticationMiddleware
from services.gateway_service.routes import health, proxy
from services.gateway_service.utils.proxy import RouteTable, UpstreamClient
from services.gateway_service.utils.user_client import GatewayUserClient

logger = structlog.get_logger(__name__)


def build_route_table(user_service: UpstreamClient, project_service: UpstreamClient) -> RouteTable:
    return RouteTable([
        ("/api/v1/auth", user_service),
        ("/api/v1/users", user_service),
        ("/api/v1/projects", project_service),
    ])


def create_app(
    user_client: Optional[GatewayUserClient] = None,
    route_table: Optional[RouteTable] = None,
) -> FastAPI:
    """
    Build the gateway application

    Args:
        user_client: Client used to confirm token identities
        route_table: Upstream routing; defaults to the configured service URLs
    """
    user_client = user_client or GatewayUserClient(settings.user_service_url)
    route_table = route_table or build_route_table(
        UpstreamClient("user-service", settings.user_service_url),
        UpstreamClient("project-service", settings.project_service_url),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events"""
        if os.getenv("ENVIRONMENT") != "testing":
            init_logging()

        logger.info("Starting Gateway", routes=route_table.prefixes)
        await user_client.start()
        await route_table.start()

        yield

        await route_table.stop()
        await user_client.stop()
        logger.info("Gateway shutdown complete")

    app = FastAPI(
        title="Codivio - Gateway",
        description="Authenticates requests and routes them to backend services",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.route_table = route_table
    app.state.user_client = user_client

    # Last added runs first: CORS, then request logging, then authentication
    app.add_middleware(JwtAuthenticationMiddleware, user_client=user_client)
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(proxy.router, tags=["Proxy"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "services.gateway_service.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
