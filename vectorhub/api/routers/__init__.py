"""API routers."""

from .analytics import router as analytics_router
from .embeddings import router as embeddings_router
from .health import router as health_router
from .jobs import router as jobs_router

__all__ = [
    "analytics_router",
    "embeddings_router",
    "health_router",
    "jobs_router",
]
