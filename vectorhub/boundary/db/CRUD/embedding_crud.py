"""
Embedding collection and vector CRUD operations.

Provides owner-scoped reads, batch inserts and collection deletion for
the vector tables.

Dependencies: sqlalchemy, vectorhub.boundary.db.models.embedding_model
System role: Vector persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vectorhub.boundary.db.CRUD.base_crud import BaseCRUD
from vectorhub.boundary.db.models.embedding_model import (
    EmbeddingCollectionModel,
    EmbeddingVectorModel,
)


class EmbeddingCollectionCRUD(BaseCRUD[EmbeddingCollectionModel]):
    """CRUD operations for EmbeddingCollectionModel."""

    def __init__(self) -> None:
        super().__init__(EmbeddingCollectionModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner: str,
    ) -> EmbeddingCollectionModel | None:
        """Retrieve a collection by ID when it belongs to owner."""
        stmt = select(EmbeddingCollectionModel).where(
            EmbeddingCollectionModel.id == id,
            EmbeddingCollectionModel.owner == owner,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner: str,
    ) -> Sequence[tuple[EmbeddingCollectionModel, int]]:
        """
        List an owner's collections with their vector counts, newest first.

        Args:
            session: Async database session
            owner: Owning user identifier

        Returns:
            Sequence of (collection, vector_count) pairs
        """
        counts = (
            select(
                EmbeddingVectorModel.collection_id,
                func.count(EmbeddingVectorModel.position).label("vector_count"),
            )
            .group_by(EmbeddingVectorModel.collection_id)
            .subquery()
        )
        stmt = (
            select(EmbeddingCollectionModel, func.coalesce(counts.c.vector_count, 0))
            .outerjoin(counts, counts.c.collection_id == EmbeddingCollectionModel.id)
            .where(EmbeddingCollectionModel.owner == owner)
            .order_by(EmbeddingCollectionModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return [(row[0], int(row[1])) for row in result.all()]

    async def delete_with_vectors(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a collection together with every vector it owns.

        Vectors are removed with an explicit statement so the cascade does
        not depend on backend foreign-key enforcement.

        Returns:
            True if the collection existed, False otherwise
        """
        await session.execute(
            delete(EmbeddingVectorModel).where(EmbeddingVectorModel.collection_id == id)
        )
        return await self.delete_by_id(session, id)


class EmbeddingVectorCRUD(BaseCRUD[EmbeddingVectorModel]):
    """CRUD operations for EmbeddingVectorModel."""

    def __init__(self) -> None:
        super().__init__(EmbeddingVectorModel)

    async def bulk_create(
        self,
        session: AsyncSession,
        rows: list[dict],
    ) -> list[EmbeddingVectorModel]:
        """
        Insert several vectors in one flush.

        Args:
            session: Async database session
            rows: Column values per vector

        Returns:
            Created model instances in input order
        """
        instances = [EmbeddingVectorModel(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner: str,
        collection_id: UUID | None = None,
        source_type: str | None = None,
        newest_first: bool = False,
    ) -> Sequence[EmbeddingVectorModel]:
        """
        Retrieve an owner's vectors, in insertion order unless asked otherwise.

        Args:
            session: Async database session
            owner: Owning user identifier
            collection_id: Restrict to one collection
            source_type: Restrict to one source type
            newest_first: Reverse insertion order

        Returns:
            Sequence of EmbeddingVectorModels
        """
        stmt = select(EmbeddingVectorModel).where(EmbeddingVectorModel.owner == owner)
        if collection_id is not None:
            stmt = stmt.where(EmbeddingVectorModel.collection_id == collection_id)
        if source_type is not None:
            stmt = stmt.where(EmbeddingVectorModel.source_type == source_type)
        order = EmbeddingVectorModel.position
        stmt = stmt.order_by(order.desc() if newest_first else order.asc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner: str,
    ) -> EmbeddingVectorModel | None:
        """Retrieve a vector by ID when it belongs to owner."""
        stmt = select(EmbeddingVectorModel).where(
            EmbeddingVectorModel.id == id,
            EmbeddingVectorModel.owner == owner,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_source_id(
        self,
        session: AsyncSession,
        source_id: str,
        owner: str,
    ) -> EmbeddingVectorModel | None:
        """Retrieve the earliest vector stored for a source ID."""
        stmt = (
            select(EmbeddingVectorModel)
            .where(
                EmbeddingVectorModel.source_id == source_id,
                EmbeddingVectorModel.owner == owner,
            )
            .order_by(EmbeddingVectorModel.position.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


collection_crud = EmbeddingCollectionCRUD()
vector_crud = EmbeddingVectorCRUD()
