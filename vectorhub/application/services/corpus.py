"""
Corpus snapshots for the analytics services.

Converts stored embedding records into the VectorPoint values the
analytics engines consume.
"""

from typing import Sequence
from uuid import UUID

from vectorhub.boundary.vdb.vector_schemas import EmbeddingRecord
from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.core.analytics import VectorPoint


def to_point(record: EmbeddingRecord) -> VectorPoint:
    return VectorPoint(
        id=str(record.id),
        vector=record.vector,
        created_at=record.created_at,
        metadata=record.metadata,
        source_type=record.source_type,
        source_id=record.source_id,
    )


def to_points(records: Sequence[EmbeddingRecord]) -> list[VectorPoint]:
    return [to_point(r) for r in records]


async def load_points(
    store: VectorStore,
    owner: str,
    collection_id: UUID | None = None,
    source_type: str | None = None,
) -> list[VectorPoint]:
    """Fetch an owner's vectors once, in insertion order."""
    records = await store.get_all(owner, collection_id=collection_id, source_type=source_type)
    return to_points(records)
