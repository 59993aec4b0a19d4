"""
Project Service - Main Application
Handles projects, membership and role-based access
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

# Import models so their tables register on the shared metadata
import services.project_service.models  # noqa: F401
from shared.utils.exceptions import register_exception_handlers
from shared.utils.logger import init_logging, log_requests
from services.project_service.config import settings
from services.project_service.routes import projects, health
from services.project_service.utils.database import project_db
from services.project_service.utils.dependencies import user_client

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    if os.getenv("ENVIRONMENT") != "testing":
        init_logging()

    logger.info("Starting Project Service")

    try:
        project_db.initialize()
        if settings.auto_create_tables:
            await project_db.create_tables()
        logger.info("Database connection initialized")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    await user_client.start()

    yield

    await user_client.stop()
    await project_db.close()
    logger.info("Project Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Codivio - Project Service",
    description="Projects, membership and role-based access",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(log_requests)
register_exception_handlers(app)

# Register routes
app.include_router(health.router, tags=["Health"])
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "project-service",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "services.project_service.main:app",
        host="0.0.0.0",
        port=8082,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
