"""
Health check routes for project service
"""

from fastapi import APIRouter, HTTPException

import structlog

from shared.schemas.response import success
from services.project_service.utils.database import project_db

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return success({
        "service": "project-service",
        "status": "healthy",
        "version": "1.0.0",
    })


@router.get("/health/database")
async def database_health_check():
    """Database connectivity check"""
    if not await project_db.test_connection():
        logger.error("Database health check failed")
        raise HTTPException(status_code=503, detail="Database unavailable")

    return success({
        "service": "project-service",
        "database": "healthy",
    })
