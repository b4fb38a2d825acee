"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_anomaly_service,
    get_cluster_service,
    get_collection_service,
    get_ingestion_service,
    get_job_service,
    get_search_service,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_anomaly_service",
    "get_cluster_service",
    "get_collection_service",
    "get_ingestion_service",
    "get_job_service",
    "get_search_service",
    "get_service_cache",
]
