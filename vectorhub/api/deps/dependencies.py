"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators (the
session factory, vector store, embedding provider, blob storage and the
job service that owns background tasks) live in a ServiceCache; request
scoped services are cheap wrappers built from it.

Dependencies: vectorhub.configs, vectorhub.application, vectorhub.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from vectorhub.configs import Settings, get_settings
from vectorhub.application.services import (
    AnomalyService,
    ClusterService,
    CollectionService,
    IngestionService,
    JobService,
    SearchService,
)
from vectorhub.boundary.embeddings.embedding_provider import (
    EmbeddingProvider,
    LangChainEmbeddingProvider,
)
from vectorhub.boundary.storage.blob_storage import BlobStorage
from vectorhub.boundary.vdb.vector_store import VectorStore


class ServiceCache:
    """Container for cached service instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        blob_storage: BlobStorage | None = None,
    ) -> None:
        self._settings = settings
        self._session_factory = session_factory
        self._embedding_provider = embedding_provider
        self._blob_storage = blob_storage
        self._vector_store = None
        self._pipeline = None
        self._job_service = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def engine(self) -> AsyncEngine:
        return self.session_factory.kw["bind"]

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get cached session factory."""
        if self._session_factory is None:
            from vectorhub.boundary.db.connection import get_async_session_factory
            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def vector_store(self) -> VectorStore:
        """Get cached vector store."""
        if self._vector_store is None:
            self._vector_store = VectorStore(self.session_factory)
        return self._vector_store

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get cached embedding provider."""
        if self._embedding_provider is None:
            self._embedding_provider = LangChainEmbeddingProvider(self.settings.embeddings)
        return self._embedding_provider

    @property
    def blob_storage(self) -> BlobStorage:
        """Get cached blob storage."""
        if self._blob_storage is None:
            from vectorhub.boundary.storage.storage_factory import get_blob_storage
            self._blob_storage = get_blob_storage(self.settings.storage)
        return self._blob_storage

    @property
    def pipeline(self):
        """Get cached embedding pipeline."""
        if self._pipeline is None:
            from vectorhub.core.ingestion.entrypoint import EmbeddingPipeline
            from vectorhub.core.ingestion.tasks import ReadingTask

            ingestion = self.settings.ingestion
            self._pipeline = EmbeddingPipeline(
                vector_store=self.vector_store,
                embedding_provider=self.embedding_provider,
                settings=ingestion,
                reader=ReadingTask(
                    self.blob_storage,
                    stream_threshold_bytes=ingestion.stream_threshold_bytes,
                    slice_bytes=ingestion.stream_slice_bytes,
                ),
                default_model_id=self.settings.embeddings.default_model_id,
            )
        return self._pipeline

    @property
    def job_service(self) -> JobService:
        """Get cached job service wired to the ingestion runner."""
        if self._job_service is None:
            from vectorhub.workers.tasks.embedding_ingestion import IngestionJobRunner

            runner = IngestionJobRunner(
                self.session_factory, self.pipeline, self.settings.ingestion
            )
            self._job_service = JobService(
                self.session_factory, runner=runner.run, settings=self.settings.ingestion
            )
        return self._job_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._vector_store = None
        self._pipeline = None
        self._job_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_job_service(cache: ServiceCache = Depends(get_service_cache)) -> JobService:
    """
    Get the shared job service.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        JobService: Job service owning the background ingestion tasks
    """
    return cache.job_service


def get_ingestion_service(cache: ServiceCache = Depends(get_service_cache)) -> IngestionService:
    """
    Get ingestion service instance.

    Raises:
        ConfigurationError: If the configured blob storage is incomplete
    """
    return IngestionService(
        job_service=cache.job_service,
        storage=cache.blob_storage,
        settings=cache.settings.ingestion,
    )


def get_collection_service(cache: ServiceCache = Depends(get_service_cache)) -> CollectionService:
    return CollectionService(cache.vector_store)


def get_search_service(cache: ServiceCache = Depends(get_service_cache)) -> SearchService:
    return SearchService(
        vector_store=cache.vector_store,
        embedding_provider=cache.embedding_provider,
        settings=cache.settings.analytics,
        default_model_id=cache.settings.embeddings.default_model_id,
    )


def get_cluster_service(cache: ServiceCache = Depends(get_service_cache)) -> ClusterService:
    return ClusterService(cache.vector_store, settings=cache.settings.analytics)


def get_anomaly_service(cache: ServiceCache = Depends(get_service_cache)) -> AnomalyService:
    return AnomalyService(cache.vector_store, settings=cache.settings.analytics)
