"""
Database models package.

Exports:
  - JobModel, JobStatus, JobType: Job ORM model and related enums
  - EmbeddingCollectionModel, EmbeddingVectorModel: Vector persistence

Dependencies: sqlalchemy, vectorhub.boundary.db.base
System role: Database model definitions for domain entities
"""

from vectorhub.boundary.db.models.embedding_model import (
    EmbeddingCollectionModel,
    EmbeddingVectorModel,
)
from vectorhub.boundary.db.models.job_model import (
    JOB_TRANSITIONS,
    JobModel,
    JobStatus,
    JobType,
    can_transition,
)

__all__ = [
    "JOB_TRANSITIONS",
    "JobModel",
    "JobStatus",
    "JobType",
    "can_transition",
    "EmbeddingCollectionModel",
    "EmbeddingVectorModel",
]
