"""
Application services.

Orchestrate the core engines and boundary adapters for the API layer.
"""

from vectorhub.application.services.anomaly_service import AnomalyService
from vectorhub.application.services.cluster_service import ClusterService
from vectorhub.application.services.collection_service import CollectionService
from vectorhub.application.services.ingestion_service import IngestionService, UploadedFile
from vectorhub.application.services.job_service import JobService
from vectorhub.application.services.search_service import SearchService

__all__ = [
    "AnomalyService",
    "ClusterService",
    "CollectionService",
    "IngestionService",
    "UploadedFile",
    "JobService",
    "SearchService",
]
