"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: vectorhub.api.deps
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vectorhub.api.deps import ServiceCache, get_service_cache
from vectorhub.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Database health check; 502 when the database is unreachable."""
    try:
        async with cache.session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise UpstreamError("Database unreachable", service="database") from e
    return HealthResponse(status="healthy", message="Database connection OK")
