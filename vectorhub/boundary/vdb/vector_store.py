"""
Vector store accessor.

Persists and retrieves embedding vectors through the relational store.
Each put_batch call is one transaction, so a batch is written completely
or not at all.

Dependencies: sqlalchemy, vectorhub.boundary.db
System role: Vector persistence interface for the pipeline and analytics
"""

import logging
import uuid
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vectorhub.boundary.db.CRUD.embedding_crud import collection_crud, vector_crud
from vectorhub.boundary.vdb.vector_schemas import (
    CollectionRecord,
    EmbeddingRecord,
    NewEmbedding,
)
from vectorhub.core.exceptions import NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class VectorStore:
    """
    Owner-scoped access to embedding collections and vectors.

    Opens a short-lived session per call from the injected factory.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_collection(
        self,
        name: str,
        model_id: str,
        owner: str,
        description: str | None = None,
        job_id: uuid.UUID | None = None,
    ) -> CollectionRecord:
        """
        Create an empty collection.

        Dimension stays unset until the first batch is written.
        """
        try:
            async with self._session_factory() as session:
                model = await collection_crud.create(
                    session,
                    name=name,
                    description=description,
                    model_id=model_id,
                    owner=owner,
                    job_id=job_id,
                )
                await session.commit()
                return CollectionRecord.model_validate(model)
        except SQLAlchemyError as e:
            raise UpstreamError(
                f"Failed to create collection '{name}'",
                service="database",
                details={"error": str(e)},
            ) from e

    async def put_batch(
        self,
        collection_id: uuid.UUID,
        owner: str,
        records: Sequence[NewEmbedding],
        batch_index: int = 0,
    ) -> list[EmbeddingRecord]:
        """
        Write one batch of vectors atomically.

        Args:
            collection_id: Target collection
            owner: Owning user identifier
            records: Vectors to insert, in order
            batch_index: Position of this batch within the ingestion

        Returns:
            Stored records in input order

        Raises:
            NotFoundError: If the collection does not exist
            ValidationError: If a vector's length differs from the collection's
            UpstreamError: If the write fails; names the batch index
        """
        if not records:
            return []

        try:
            async with self._session_factory() as session:
                collection = await collection_crud.get_by_id(session, collection_id)
                if collection is None:
                    raise NotFoundError("collection", collection_id)

                dimension = collection.dimension or len(records[0].vector)
                for position, record in enumerate(records):
                    if len(record.vector) != dimension:
                        raise ValidationError(
                            f"Vector dimension {len(record.vector)} does not match "
                            f"collection dimension {dimension} in batch {batch_index}",
                            field="vector",
                            details={"batch_index": batch_index, "record": position},
                        )
                if collection.dimension is None:
                    collection.dimension = dimension

                models = await vector_crud.bulk_create(
                    session,
                    [
                        {
                            "collection_id": collection_id,
                            "source_type": record.source_type,
                            "source_id": record.source_id,
                            "vector": [float(v) for v in record.vector],
                            "metadata_": record.metadata,
                            "owner": owner,
                        }
                        for record in records
                    ],
                )
                stored = [EmbeddingRecord.from_model(m) for m in models]
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"{__name__}:put_batch - Batch {batch_index} failed: {e}",
                extra={"collection_id": str(collection_id), "batch_index": batch_index},
            )
            raise UpstreamError(
                f"Vector batch {batch_index} failed to write",
                service="database",
                details={"batch_index": batch_index, "error": str(e)},
            ) from e

        logger.debug(
            f"{__name__}:put_batch - Stored batch {batch_index}",
            extra={"collection_id": str(collection_id), "count": len(stored)},
        )
        return stored

    async def get_all(
        self,
        owner: str,
        collection_id: uuid.UUID | None = None,
        source_type: str | None = None,
        newest_first: bool = False,
    ) -> list[EmbeddingRecord]:
        """Return an owner's vectors in insertion order, optionally filtered."""
        async with self._session_factory() as session:
            models = await vector_crud.list_for_owner(
                session,
                owner,
                collection_id=collection_id,
                source_type=source_type,
                newest_first=newest_first,
            )
            return [EmbeddingRecord.from_model(m) for m in models]

    async def get_by_id(self, vector_id: uuid.UUID, owner: str) -> EmbeddingRecord:
        async with self._session_factory() as session:
            model = await vector_crud.get_for_owner(session, vector_id, owner)
            if model is None:
                raise NotFoundError("vector", vector_id)
            return EmbeddingRecord.from_model(model)

    async def get_by_source_id(self, source_id: str, owner: str) -> EmbeddingRecord:
        async with self._session_factory() as session:
            model = await vector_crud.get_by_source_id(session, source_id, owner)
            if model is None:
                raise NotFoundError("vector", source_id)
            return EmbeddingRecord.from_model(model)

    async def get_collection(self, collection_id: uuid.UUID, owner: str) -> CollectionRecord:
        async with self._session_factory() as session:
            model = await collection_crud.get_for_owner(session, collection_id, owner)
            if model is None:
                raise NotFoundError("collection", collection_id)
            return CollectionRecord.model_validate(model)

    async def list_collections(self, owner: str) -> list[CollectionRecord]:
        """List an owner's collections with vector counts, newest first."""
        async with self._session_factory() as session:
            rows = await collection_crud.list_for_owner(session, owner)
            return [
                CollectionRecord.model_validate(model).model_copy(
                    update={"vector_count": count}
                )
                for model, count in rows
            ]

    async def update_metadata(
        self,
        vector_id: uuid.UUID,
        owner: str,
        metadata: dict[str, Any],
        merge: bool = True,
    ) -> EmbeddingRecord:
        """
        Update a vector's metadata.

        Args:
            vector_id: Vector to update
            owner: Owning user identifier
            metadata: New metadata values
            merge: Merge into existing metadata instead of replacing it

        Raises:
            NotFoundError: If the vector does not exist for owner
        """
        async with self._session_factory() as session:
            model = await vector_crud.get_for_owner(session, vector_id, owner)
            if model is None:
                raise NotFoundError("vector", vector_id)
            new_metadata = {**(model.metadata_ or {}), **metadata} if merge else dict(metadata)
            model.metadata_ = new_metadata
            await session.commit()
            return EmbeddingRecord.from_model(model)

    async def delete_collection(self, collection_id: uuid.UUID, owner: str) -> None:
        """
        Delete a collection and all of its vectors.

        Raises:
            NotFoundError: If the collection does not exist for owner
        """
        async with self._session_factory() as session:
            model = await collection_crud.get_for_owner(session, collection_id, owner)
            if model is None:
                raise NotFoundError("collection", collection_id)
            await collection_crud.delete_with_vectors(session, collection_id)
            await session.commit()

        logger.info(
            f"{__name__}:delete_collection - Deleted collection",
            extra={"collection_id": str(collection_id), "owner": owner},
        )
