"""
Tests for ServiceCache wiring.

The cache is built from injected collaborators, so a job created through
its JobService runs the real pipeline against the test database.
"""

import pytest

from vectorhub.api.deps import ServiceCache, get_ingestion_service, get_search_service
from vectorhub.boundary.db.models.job_model import JobStatus
from vectorhub.configs.analytics import AnalyticsSettings
from vectorhub.configs.embeddings import EmbeddingSettings
from vectorhub.configs.ingestion import IngestionSettings
from vectorhub.configs.settings import Settings
from vectorhub.configs.storage import StorageSettings


@pytest.fixture
def cache(session_factory, fake_provider, blob_storage) -> ServiceCache:
    settings = Settings(
        _env_file=None,
        ingestion=IngestionSettings(_env_file=None),
        embeddings=EmbeddingSettings(_env_file=None, default_model_id="fake-model"),
        storage=StorageSettings(_env_file=None),
        analytics=AnalyticsSettings(_env_file=None),
    )
    return ServiceCache(
        settings=settings,
        session_factory=session_factory,
        embedding_provider=fake_provider,
        blob_storage=blob_storage,
    )


def test_cached_instances_are_reused(cache) -> None:
    assert cache.job_service is cache.job_service
    assert cache.vector_store is cache.vector_store
    assert get_ingestion_service(cache)._job_service is cache.job_service


@pytest.mark.asyncio
async def test_text_job_runs_through_cache_wiring(cache) -> None:
    # Arrange
    ingestion = get_ingestion_service(cache)

    # Act
    job_id = await ingestion.submit_text("alice", "vectors all the way down", collection_name="notes")
    await cache.job_service.drain()

    # Assert
    job = await cache.job_service.get_job_status(job_id, "alice")
    assert job.status == JobStatus.COMPLETED
    assert job.result["embeddingsStored"] == 1

    matches = await get_search_service(cache).search("alice", "vectors all the way down")
    assert matches[0].score == pytest.approx(1.0)


def test_clear_drops_cached_services(cache) -> None:
    job_service = cache.job_service

    cache.clear()

    assert cache.job_service is not job_service
