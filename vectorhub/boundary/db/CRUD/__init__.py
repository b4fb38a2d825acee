"""
CRUD operations package.

Exports CRUD classes and their module-level singletons.
"""

from vectorhub.boundary.db.CRUD.base_crud import BaseCRUD
from vectorhub.boundary.db.CRUD.embedding_crud import (
    EmbeddingCollectionCRUD,
    EmbeddingVectorCRUD,
    collection_crud,
    vector_crud,
)
from vectorhub.boundary.db.CRUD.job_crud import JobCRUD, job_crud

__all__ = [
    "BaseCRUD",
    "JobCRUD",
    "EmbeddingCollectionCRUD",
    "EmbeddingVectorCRUD",
    "job_crud",
    "collection_crud",
    "vector_crud",
]
