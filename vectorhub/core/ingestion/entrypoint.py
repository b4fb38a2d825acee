"""
Embedding pipeline orchestrator.

Coordinates reading, chunking, embedding and batched vector writes for one
ingestion. ingest() never raises: every outcome comes back as an
IngestionSuccess or IngestionFailure.

Dependencies: All task modules, vectorhub.boundary
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Sequence

from vectorhub.boundary.embeddings.embedding_provider import EmbeddingProvider
from vectorhub.boundary.vdb.vector_schemas import NewEmbedding
from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.configs.ingestion import IngestionSettings
from vectorhub.core.exceptions import ConfigurationError, ValidationError, VectorHubError
from .models import (
    ChunkingConfig,
    DatabaseSource,
    DocumentChunk,
    FileSource,
    IngestionFailure,
    IngestionResult,
    IngestionSuccess,
    Source,
    TextSource,
)
from .tasks import (
    ChunkingTask,
    DatabaseTask,
    EmbeddingTask,
    ReadingTask,
    VectorStoreTask,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[dict[str, Any]], Awaitable[None]]

CHUNKED_PROGRESS = 10
STORED_PROGRESS_SPAN = 85
ROW_PREVIEW_CHARS = 200


class _PlannedChunk:
    """Chunk plus the source fields it is stored with."""

    __slots__ = ("chunk", "source_type", "source_id", "extra")

    def __init__(
        self,
        chunk: DocumentChunk,
        source_type: str,
        source_id: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.chunk = chunk
        self.source_type = source_type
        self.source_id = source_id
        self.extra = extra or {}


class EmbeddingPipeline:
    """Orchestrate ingestion: read -> chunk -> embed -> store in batches."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_provider: EmbeddingProvider,
        settings: IngestionSettings,
        reader: ReadingTask | None = None,
        database_task: DatabaseTask | None = None,
        default_model_id: str | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            vector_store: Vector store accessor
            embedding_provider: Embedding model provider
            settings: Pipeline settings (batch size, page size)
            reader: File reader; required for FileSource inputs
            database_task: Row source; created from settings when omitted
            default_model_id: Model used when ingest() is not given one
        """
        self._vector_store = vector_store
        self._embedding_provider = embedding_provider
        self._settings = settings
        self._reader = reader
        self._database_task = database_task or DatabaseTask(
            settings.database_page_size, settings.database_connections
        )
        self._default_model_id = default_model_id

    async def ingest(
        self,
        sources: Source | Sequence[Source],
        chunking: ChunkingConfig,
        collection_name: str,
        owner: str,
        model_id: str | None = None,
        description: str | None = None,
        job_id: uuid.UUID | None = None,
        progress: ProgressCallback | None = None,
    ) -> IngestionResult:
        """
        Ingest one or more sources into a new collection.

        The collection is created just before the first batch is written, so
        an ingestion that fails while embedding its first batch leaves
        nothing behind. Vectors written before a later failure remain.

        Args:
            sources: Text, file or database sources
            chunking: Chunk size and overlap
            collection_name: Name of the collection to create
            owner: Owning user identifier
            model_id: Embedding model (defaults to the pipeline default)
            description: Collection description
            job_id: Job driving this ingestion, stamped in chunk metadata
            progress: Receives result updates as ingestion proceeds

        Returns:
            IngestionResult: IngestionSuccess or IngestionFailure
        """
        start_time = time.perf_counter()
        if isinstance(sources, (TextSource, FileSource, DatabaseSource)):
            sources = [sources]
        model_id = model_id or self._default_model_id

        rows_processed = 0
        planned: list[_PlannedChunk] = []
        stored = 0
        collection_id: uuid.UUID | None = None

        try:
            if not model_id:
                raise ConfigurationError("No embedding model configured", setting="model_id")

            chunking_task = ChunkingTask(chunking)
            for source in sources:
                rows, chunks = await self._plan_source(source, chunking_task, owner)
                rows_processed += rows
                planned.extend(chunks)

            total = len(planned)
            if total == 0:
                raise ValidationError("No text chunks generated from input", field="sources")

            await self._report(progress, {
                "message": f"Created {total} chunks, generating embeddings...",
                "progress": CHUNKED_PROGRESS,
                "rowsProcessed": rows_processed,
                "chunksCreated": total,
                "embeddingsStored": 0,
            })

            embedding_task = EmbeddingTask(self._embedding_provider, model_id)
            store_task: VectorStoreTask | None = None
            batch_size = self._settings.write_batch_size

            for start in range(0, total, batch_size):
                batch = planned[start:start + batch_size]
                vectors = await embedding_task.embed([p.chunk for p in batch])

                if store_task is None:
                    collection = await self._vector_store.create_collection(
                        name=collection_name,
                        model_id=model_id,
                        owner=owner,
                        description=description,
                        job_id=job_id,
                    )
                    collection_id = collection.id
                    store_task = VectorStoreTask(
                        self._vector_store, collection_id, owner, batch_size=batch_size
                    )

                records = [
                    NewEmbedding(
                        vector=vector,
                        source_type=p.source_type,
                        source_id=p.source_id,
                        metadata=self._chunk_metadata(p, start + offset, total, job_id),
                    )
                    for offset, (p, vector) in enumerate(zip(batch, vectors))
                ]
                stored += len(await store_task.write(records))

                await self._report(progress, {
                    "message": f"Stored {stored}/{total} embeddings...",
                    "progress": CHUNKED_PROGRESS + STORED_PROGRESS_SPAN * stored / total,
                    "rowsProcessed": rows_processed,
                    "chunksCreated": total,
                    "embeddingsStored": stored,
                })

        except VectorHubError as e:
            logger.warning(
                f"{__name__}:ingest - Ingestion failed: {e}",
                extra={"job_id": str(job_id) if job_id else None, "stored": stored},
            )
            return IngestionFailure(
                error=e.message,
                error_type=type(e).__name__,
                collection_id=collection_id,
                rows_processed=rows_processed,
                chunks_created=len(planned),
                embeddings_stored=stored,
            )
        except Exception as e:
            logger.error(
                f"{__name__}:ingest - Unexpected {type(e).__name__}: {e}",
                exc_info=True,
                extra={"job_id": str(job_id) if job_id else None, "stored": stored},
            )
            return IngestionFailure(
                error=f"{type(e).__name__}: {e}",
                error_type=type(e).__name__,
                collection_id=collection_id,
                rows_processed=rows_processed,
                chunks_created=len(planned),
                embeddings_stored=stored,
            )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:ingest - Stored {stored} embeddings in {elapsed_ms:.0f}ms",
            extra={"job_id": str(job_id) if job_id else None, "collection_id": str(collection_id)},
        )
        return IngestionSuccess(
            collection_id=collection_id,
            rows_processed=rows_processed,
            chunks_created=len(planned),
            embeddings_stored=stored,
            processing_time_ms=elapsed_ms,
        )

    async def _plan_source(
        self,
        source: Source,
        chunking_task: ChunkingTask,
        owner: str,
    ) -> tuple[int, list[_PlannedChunk]]:
        """Chunk one source; returns (rows_processed, planned chunks)."""
        if isinstance(source, TextSource):
            if not source.text.strip():
                return 0, []
            chunks = chunking_task.chunk(source.text, source=source.source_id)
            return 0, [_PlannedChunk(c, source.source_type, source.source_id) for c in chunks]

        if isinstance(source, FileSource):
            if self._reader is None:
                raise ConfigurationError("No blob storage configured for file ingestion")
            text = await self._reader.read_text(source.key)
            if not text.strip():
                return 0, []
            chunks = chunking_task.chunk(text, source=source.filename)
            return 0, [_PlannedChunk(c, source.source_type, source.source_id) for c in chunks]

        if isinstance(source, DatabaseSource):
            rows = await self._database_task.fetch_rows(source, owner)
            if not rows:
                raise ValidationError("Query returned no results", field="query")
            planned: list[_PlannedChunk] = []
            for row_index, row_text in enumerate(rows):
                if not row_text.strip():
                    continue
                row_source = f"{source.source_id}:{row_index}"
                for chunk_in_row, chunk in enumerate(chunking_task.chunk(row_text, source=row_source)):
                    planned.append(_PlannedChunk(
                        chunk,
                        source.source_type,
                        row_source,
                        {
                            "source_row_index": row_index,
                            "chunk_index_in_row": chunk_in_row,
                            "original_row_text_preview": row_text[:ROW_PREVIEW_CHARS],
                            "query": source.query,
                        },
                    ))
            return len(rows), planned

        raise ValidationError(f"Unsupported source: {type(source).__name__}", field="sources")

    @staticmethod
    def _chunk_metadata(
        planned: _PlannedChunk,
        index_in_job: int,
        total: int,
        job_id: uuid.UUID | None,
    ) -> dict[str, Any]:
        chunk = planned.chunk
        return {
            "content": chunk.text,
            "source": chunk.source,
            "chunk_index": chunk.index,
            "start_offset": chunk.start_offset,
            "end_offset": chunk.end_offset,
            "job_id": str(job_id) if job_id else None,
            "chunk_index_in_job": index_in_job,
            "total_chunks_in_job": total,
            **planned.extra,
        }

    @staticmethod
    async def _report(progress: ProgressCallback | None, update: dict[str, Any]) -> None:
        if progress is not None:
            await progress(update)
