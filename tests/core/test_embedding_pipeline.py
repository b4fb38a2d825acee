"""
Test suite for EmbeddingPipeline.

Runs the pipeline end to end against the in-memory database with a
deterministic embedding provider.

System role: Verification of ingestion results, batching and progress
"""

import sqlite3
from unittest.mock import AsyncMock, patch

import pytest

from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.core.ingestion.models import (
    ChunkingConfig,
    DatabaseSource,
    FileSource,
    IngestionFailure,
    IngestionSuccess,
    TextSource,
)

TWELVE_K = "".join(chr(97 + i % 26) for i in range(12000))


class TestTextIngestion:
    """Test suite for ingesting inline text."""

    @pytest.mark.asyncio
    async def test_twelve_thousand_characters_should_store_fifteen_vectors(
        self, pipeline, vector_store
    ) -> None:
        # Act
        result = await pipeline.ingest(
            TextSource(text=TWELVE_K),
            ChunkingConfig(chunk_size=1000, chunk_overlap=200),
            collection_name="big",
            owner="alice",
        )

        # Assert
        assert isinstance(result, IngestionSuccess)
        assert result.chunks_created == 15
        assert result.embeddings_stored == 15
        records = await vector_store.get_all("alice", collection_id=result.collection_id)
        assert [r.metadata["chunk_index"] for r in records] == list(range(15))
        assert records[0].metadata["content"] == TWELVE_K[:1000]
        assert records[-1].metadata["end_offset"] == 12000
        assert {r.metadata["total_chunks_in_job"] for r in records} == {15}

    @pytest.mark.asyncio
    async def test_writes_should_never_exceed_ten_vectors(self, pipeline) -> None:
        # Act
        with patch.object(VectorStore, "put_batch", autospec=True, side_effect=VectorStore.put_batch) as spy:
            result = await pipeline.ingest(
                TextSource(text=TWELVE_K),
                ChunkingConfig(chunk_size=1000, chunk_overlap=200),
                collection_name="big",
                owner="alice",
            )

        # Assert
        assert result.ok
        sizes = [len(call.args[3]) for call in spy.call_args_list]
        assert max(sizes) <= 10
        assert sum(sizes) == 15

    @pytest.mark.asyncio
    async def test_progress_should_be_monotonic_and_reach_ninety_five(self, pipeline) -> None:
        # Arrange
        updates: list[dict] = []

        async def record(update: dict) -> None:
            updates.append(update)

        # Act
        await pipeline.ingest(
            TextSource(text=TWELVE_K),
            ChunkingConfig(chunk_size=1000, chunk_overlap=200),
            collection_name="big",
            owner="alice",
            progress=record,
        )

        # Assert
        progress = [u["progress"] for u in updates]
        assert progress == sorted(progress)
        assert progress[0] == 10
        assert progress[-1] == pytest.approx(95)
        assert updates[-1]["embeddingsStored"] == 15
        assert updates[-1]["chunksCreated"] == 15

    @pytest.mark.asyncio
    async def test_blank_text_should_fail_without_collection(self, pipeline, vector_store) -> None:
        result = await pipeline.ingest(
            TextSource(text="   \n  "),
            ChunkingConfig(chunk_size=100, chunk_overlap=10),
            collection_name="empty",
            owner="alice",
        )

        assert isinstance(result, IngestionFailure)
        assert result.error == "No text chunks generated from input"
        assert await vector_store.list_collections("alice") == []


class TestFailures:
    """Test suite for failures surfacing as IngestionFailure."""

    @pytest.mark.asyncio
    async def test_embedding_failure_should_abort_and_keep_earlier_batches(
        self, pipeline, fake_provider, vector_store
    ) -> None:
        # Arrange: the 13th call fails, after the first batch of 10 is stored
        fake_provider.fail_on_call = 13

        # Act
        result = await pipeline.ingest(
            TextSource(text=TWELVE_K),
            ChunkingConfig(chunk_size=1000, chunk_overlap=200),
            collection_name="partial",
            owner="alice",
        )

        # Assert
        assert isinstance(result, IngestionFailure)
        assert result.error_type == "UpstreamError"
        assert result.embeddings_stored == 10
        assert len(await vector_store.get_all("alice", collection_id=result.collection_id)) == 10

    @pytest.mark.asyncio
    async def test_unexpected_exception_should_not_escape(self, pipeline, fake_provider) -> None:
        fake_provider.embed = AsyncMock(side_effect=RuntimeError("boom"))

        result = await pipeline.ingest(
            TextSource(text="hello"),
            ChunkingConfig(chunk_size=100, chunk_overlap=10),
            collection_name="c",
            owner="alice",
        )

        assert isinstance(result, IngestionFailure)
        assert result.error == "RuntimeError: boom"


class TestFileAndDatabaseSources:
    """Test suite for file and database sources."""

    @pytest.mark.asyncio
    async def test_files_should_be_classified_by_extension(self, pipeline, blob_storage, vector_store) -> None:
        # Arrange
        blob_storage.write("alice/1/main.py", b"print('hi')\n" * 20)
        blob_storage.write("alice/2/readme.md", b"# Title\n" * 20)
        sources = [
            FileSource(key="alice/1/main.py", filename="main.py"),
            FileSource(key="alice/2/readme.md", filename="readme.md"),
        ]

        # Act
        result = await pipeline.ingest(
            sources, ChunkingConfig(chunk_size=100, chunk_overlap=20), "files", "alice"
        )

        # Assert
        assert result.ok
        records = await vector_store.get_all("alice")
        assert {(r.source_id, r.source_type) for r in records} == {
            ("main.py", "code"),
            ("readme.md", "document"),
        }

    @pytest.mark.asyncio
    async def test_database_rows_should_be_chunked_independently(
        self, pipeline, vector_store, tmp_path
    ) -> None:
        # Arrange
        path = tmp_path / "external.db"
        conn = sqlite3.connect(path)
        conn.execute("CREATE TABLE orders (id INTEGER, item TEXT)")
        conn.executemany("INSERT INTO orders VALUES (?, ?)", [(1, "apple"), (2, "pear"), (3, None)])
        conn.commit()
        conn.close()
        source = DatabaseSource(connection_id="external", query="SELECT id, item FROM orders")

        # Act
        result = await pipeline.ingest(
            source, ChunkingConfig(chunk_size=100, chunk_overlap=10), "orders", "alice"
        )

        # Assert
        assert result.ok
        assert result.rows_processed == 3
        records = await vector_store.get_all("alice")
        assert [r.metadata["content"] for r in records] == ["id: 1 | item: apple", "id: 2 | item: pear", "id: 3"]
        assert [r.source_id for r in records] == ["database_import:0", "database_import:1", "database_import:2"]
        assert records[1].metadata["source_row_index"] == 1
        assert records[1].metadata["chunk_index_in_row"] == 0

    @pytest.mark.asyncio
    async def test_empty_query_result_should_fail(self, pipeline, tmp_path) -> None:
        path = tmp_path / "external.db"
        conn = sqlite3.connect(path)
        conn.execute("CREATE TABLE t (id INTEGER)")
        conn.commit()
        conn.close()

        result = await pipeline.ingest(
            DatabaseSource(connection_id="external", query="SELECT * FROM t"),
            ChunkingConfig(chunk_size=100, chunk_overlap=10),
            "nothing",
            "alice",
        )

        assert isinstance(result, IngestionFailure)
        assert result.error == "Query returned no results"

    @pytest.mark.asyncio
    async def test_unregistered_connection_should_fail_without_reading(self, pipeline, vector_store) -> None:
        result = await pipeline.ingest(
            DatabaseSource(connection_id="env:POSTGRES_URL", query="SELECT * FROM users"),
            ChunkingConfig(chunk_size=100, chunk_overlap=10),
            "leak",
            "alice",
        )

        assert isinstance(result, IngestionFailure)
        assert "not found" in result.error
        assert await vector_store.get_all("alice") == []
