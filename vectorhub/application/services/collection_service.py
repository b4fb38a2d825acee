"""
Embedding collection management.

Dependencies: vectorhub.boundary.vdb
System role: Collection and vector metadata management
"""

import logging
import uuid
from typing import Any

from vectorhub.boundary.vdb.vector_schemas import CollectionRecord, EmbeddingRecord
from vectorhub.boundary.vdb.vector_store import VectorStore

logger = logging.getLogger(__name__)


class CollectionService:
    def __init__(self, vector_store: VectorStore) -> None:
        self._vector_store = vector_store

    async def list_collections(self, owner: str) -> list[CollectionRecord]:
        return await self._vector_store.list_collections(owner)

    async def delete_collection(self, collection_id: uuid.UUID, owner: str) -> None:
        """Delete a collection and its vectors; NotFoundError if not owned."""
        await self._vector_store.delete_collection(collection_id, owner)

    async def update_vector_metadata(
        self,
        vector_id: uuid.UUID,
        owner: str,
        metadata: dict[str, Any],
        merge: bool = True,
    ) -> EmbeddingRecord:
        record = await self._vector_store.update_metadata(vector_id, owner, metadata, merge=merge)
        logger.info(
            f"{__name__}:update_vector_metadata - Updated vector metadata",
            extra={"vector_id": str(vector_id), "keys": sorted(metadata)},
        )
        return record
