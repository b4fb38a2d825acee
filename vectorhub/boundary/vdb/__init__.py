"""
Vector store boundary: accessor and schemas for stored embeddings.
"""

from vectorhub.boundary.vdb.vector_schemas import (
    CollectionRecord,
    EmbeddingRecord,
    NewEmbedding,
)
from vectorhub.boundary.vdb.vector_store import VectorStore

__all__ = ["VectorStore", "CollectionRecord", "EmbeddingRecord", "NewEmbedding"]
