"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - JobModel, EmbeddingCollectionModel, EmbeddingVectorModel: Core entities
  - JobStatus, JobType: Enum types for state tracking
  - job_crud, collection_crud, vector_crud: CRUD operation singletons

Dependencies: sqlalchemy, vectorhub.configs
System role: Database adapter providing persistent storage for ingestion
jobs and embedding vectors.
"""

from vectorhub.boundary.db.base import Base, TimestampMixin, UUIDMixin
from vectorhub.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from vectorhub.boundary.db.models import (
    EmbeddingCollectionModel,
    EmbeddingVectorModel,
    JobModel,
    JobStatus,
    JobType,
)
from vectorhub.boundary.db.CRUD import (
    BaseCRUD,
    EmbeddingCollectionCRUD,
    EmbeddingVectorCRUD,
    JobCRUD,
    collection_crud,
    job_crud,
    vector_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "JobModel",
    "JobStatus",
    "JobType",
    "EmbeddingCollectionModel",
    "EmbeddingVectorModel",
    # CRUD classes
    "BaseCRUD",
    "JobCRUD",
    "EmbeddingCollectionCRUD",
    "EmbeddingVectorCRUD",
    # CRUD singletons
    "job_crud",
    "collection_crud",
    "vector_crud",
]
