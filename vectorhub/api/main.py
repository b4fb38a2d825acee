"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, vectorhub.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vectorhub.api.deps.dependencies import get_service_cache
from vectorhub.api.errors import register_exception_handlers
from vectorhub.boundary.db.create_tables import create_all_tables
from vectorhub.configs import get_settings
from vectorhub.observability import configure_logging
from vectorhub.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    analytics_router,
    embeddings_router,
    health_router,
    jobs_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup configures logging, creates missing tables and pre-warms the
    service cache. Shutdown waits for in-flight ingestion jobs.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    cache = get_service_cache()
    await create_all_tables(cache.engine)
    logger.info("Pre-warming service cache...")
    _ = cache.vector_store
    _ = cache.job_service
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    logger.info("Waiting for in-flight jobs...")
    await cache.job_service.drain()
    cache.clear()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="VectorHub API",
        description="Embedding ingestion jobs, similarity search, clustering and anomaly detection",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(embeddings_router, prefix="/api/v1")
    app.include_router(analytics_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "vectorhub.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
