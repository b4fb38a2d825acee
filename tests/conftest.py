"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, vector store, deterministic embedding
provider and local blob storage
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import math

import pytest

from vectorhub.core.exceptions import UpstreamError


class FakeEmbeddingProvider:
    """
    Deterministic embedding provider.

    Vectors are derived from a hash of the text, so equal texts embed
    equally. Set fail_on_call to make the n-th call (1-based) raise.
    """

    def __init__(self, dimension: int = 8) -> None:
        self.dimension = dimension
        self.default_model_id = "fake-model"
        self.calls: list[tuple[str, str]] = []
        self.fail_on_call: int | None = None

    async def embed(self, text: str, model_id: str) -> list[float]:
        self.calls.append((text, model_id))
        if self.fail_on_call is not None and len(self.calls) >= self.fail_on_call:
            raise UpstreamError("Embedding provider unavailable", service="embedding")
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        raw = [digest[i] / 255.0 - 0.5 for i in range(self.dimension)]
        norm = math.sqrt(sum(v * v for v in raw)) or 1.0
        return [v / norm for v in raw]


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared across sessions via StaticPool."""
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from vectorhub.boundary.db.create_tables import create_all_tables, drop_all_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(engine)
    yield engine
    await drop_all_tables(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory configured like the production one."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """Single session for CRUD-level tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def vector_store(session_factory):
    from vectorhub.boundary.vdb.vector_store import VectorStore

    return VectorStore(session_factory)


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def blob_storage(tmp_path):
    from vectorhub.boundary.storage.blob_storage import LocalBlobStorage

    return LocalBlobStorage(tmp_path / "blobs")


@pytest.fixture
def ingestion_settings(tmp_path):
    """Settings with one registered external database at tmp_path/external.db."""
    from vectorhub.configs.ingestion import IngestionSettings

    return IngestionSettings(
        _env_file=None,
        database_connections={"external": {"url": f"sqlite:///{tmp_path / 'external.db'}"}},
    )


@pytest.fixture
def pipeline(vector_store, fake_provider, blob_storage, ingestion_settings):
    from vectorhub.core.ingestion.entrypoint import EmbeddingPipeline
    from vectorhub.core.ingestion.tasks import ReadingTask

    return EmbeddingPipeline(
        vector_store=vector_store,
        embedding_provider=fake_provider,
        settings=ingestion_settings,
        reader=ReadingTask(
            blob_storage,
            stream_threshold_bytes=ingestion_settings.stream_threshold_bytes,
            slice_bytes=ingestion_settings.stream_slice_bytes,
        ),
        default_model_id="fake-model",
    )
