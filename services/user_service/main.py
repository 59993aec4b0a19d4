"""
User Service - Main Application
Handles user accounts, authentication and token issuance
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

# Import models so their tables register on the shared metadata
import services.user_service.models  # noqa: F401
from shared.utils.exceptions import register_exception_handlers
from shared.utils.logger import init_logging, log_requests
from services.user_service.config import settings
from services.user_service.routes import auth, users, health
from services.user_service.utils.database import user_db

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    if os.getenv("ENVIRONMENT") != "testing":
        init_logging()

    logger.info("Starting User Service")

    try:
        user_db.initialize()
        if settings.auto_create_tables:
            await user_db.create_tables()
        logger.info("Database connection initialized")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    await user_db.close()
    logger.info("User Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Codivio - User Service",
    description="User accounts, authentication and JWT issuance",
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
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "user-service",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "services.user_service.main:app",
        host="0.0.0.0",
        port=8081,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
