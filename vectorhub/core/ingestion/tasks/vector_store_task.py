"""
Vector store write task.

Writes embedded chunks to the vector store in batches of at most
`batch_size` records; each batch is one all-or-nothing store call.

Dependencies: vectorhub.boundary.vdb
System role: Persistence stage of the embedding ingestion pipeline
"""

import logging
import uuid

from vectorhub.boundary.vdb.vector_schemas import EmbeddingRecord, NewEmbedding
from vectorhub.boundary.vdb.vector_store import VectorStore

logger = logging.getLogger(__name__)


class VectorStoreTask:
    """Write one ingestion's vectors to a collection."""

    def __init__(
        self,
        store: VectorStore,
        collection_id: uuid.UUID,
        owner: str,
        batch_size: int = 10,
    ) -> None:
        """
        Initialize vector store task.

        Args:
            store: Vector store accessor
            collection_id: Collection receiving the vectors
            owner: Owning user identifier
            batch_size: Maximum vectors per store call (1-10)
        """
        if not 0 < batch_size <= 10:
            raise ValueError("batch_size must be between 1 and 10")
        self._store = store
        self._collection_id = collection_id
        self._owner = owner
        self._batch_size = batch_size
        self._batches_written = 0

    @property
    def collection_id(self) -> uuid.UUID:
        return self._collection_id

    async def write(self, records: list[NewEmbedding]) -> list[EmbeddingRecord]:
        """
        Write records, splitting into store calls of at most batch_size.

        Batch indexes count up across calls, so an error always names the
        batch's position within the whole ingestion.

        Args:
            records: Vectors with source and metadata, in chunk order

        Returns:
            list[EmbeddingRecord]: Stored records in input order

        Raises:
            UpstreamError: If a batch fails to write
            ValidationError: If a vector's dimension differs from the collection's
        """
        stored: list[EmbeddingRecord] = []
        for start in range(0, len(records), self._batch_size):
            batch = records[start:start + self._batch_size]
            stored.extend(
                await self._store.put_batch(
                    self._collection_id,
                    self._owner,
                    batch,
                    batch_index=self._batches_written,
                )
            )
            self._batches_written += 1
        logger.debug(
            f"{__name__}:write - Wrote {len(stored)} vectors",
            extra={"collection_id": str(self._collection_id), "batches": self._batches_written},
        )
        return stored
