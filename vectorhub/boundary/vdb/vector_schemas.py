"""
Vector store schemas.

Pydantic models for vector store interactions (new records, stored records,
collections). Keeps ORM instances from leaking past the accessor.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NewEmbedding(BaseModel):
    """Vector waiting to be written by VectorStore.put_batch."""

    vector: list[float] = Field(description="Embedding values")
    source_type: str = Field(description="document, code, database or text")
    source_id: str = Field(description="File name, row reference or logical source")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Chunk text and provenance")


class EmbeddingRecord(BaseModel):
    """Stored embedding vector."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    collection_id: uuid.UUID
    vector: list[float]
    source_type: str
    source_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    owner: str
    created_at: datetime | None = None

    @property
    def dimension(self) -> int:
        return len(self.vector)

    @classmethod
    def from_model(cls, model: Any) -> "EmbeddingRecord":
        """Build a record from an EmbeddingVectorModel."""
        return cls(
            id=model.id,
            collection_id=model.collection_id,
            vector=list(model.vector),
            source_type=model.source_type,
            source_id=model.source_id,
            metadata=dict(model.metadata_ or {}),
            owner=model.owner,
            created_at=model.created_at,
        )


class CollectionRecord(BaseModel):
    """Stored embedding collection."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    model_id: str
    dimension: int | None = None
    owner: str
    job_id: uuid.UUID | None = None
    created_at: datetime | None = None
    vector_count: int = Field(default=0, description="Number of stored vectors")
