"""
Embedding collection and vector ORM models.

A collection groups the vectors produced by one ingestion; every vector in
a collection shares the collection's dimensionality.

Dependencies: sqlalchemy, vectorhub.boundary.db.base
System role: Persistence for embedding vectors and their metadata
"""

import uuid

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vectorhub.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class EmbeddingCollectionModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Named group of embedding vectors.

    Attributes:
        id: UUID primary key
        name: Caller-supplied collection name
        description: Optional free text
        model_id: Embedding model used for every vector in the collection
        dimension: Vector length; fixed by the first stored vector
        owner: Owning user identifier
        job_id: Ingestion job that produced the collection (if any)
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "embedding_collections"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    model_id: Mapped[str] = mapped_column(String(255), nullable=False)
    dimension: Mapped[int | None] = mapped_column(Integer, nullable=True)
    owner: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    job_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    vectors: Mapped[list["EmbeddingVectorModel"]] = relationship(
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class EmbeddingVectorModel(Base, CreatedAtMixin):
    """
    Single persisted embedding vector.

    `position` is an autoincrement surrogate key that records insertion
    order; `id` is the public identifier.

    Attributes:
        position: Insertion-order primary key
        id: Public UUID identifier
        collection_id: Parent collection (cascade delete)
        source_type: document, code, database or text
        source_id: File name, row reference or logical source
        vector: Ordered list of floats
        metadata_: Chunk text and provenance (column "metadata")
        owner: Owning user identifier
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "embedding_vectors"

    position: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        default=uuid.uuid4,
        nullable=False,
        unique=True,
        index=True,
    )
    collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("embedding_collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_type: Mapped[str] = mapped_column(String(32), nullable=False)
    source_id: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    vector: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    owner: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    collection: Mapped[EmbeddingCollectionModel] = relationship(back_populates="vectors")
