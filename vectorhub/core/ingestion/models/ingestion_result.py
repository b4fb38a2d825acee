"""
Ingestion result models.

EmbeddingPipeline.ingest returns one of these instead of raising, and the
job worker decides the job's final status from the variant it receives.

Dependencies: pydantic
System role: Return type for EmbeddingPipeline.ingest()
"""

from typing import Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field


class IngestionSuccess(BaseModel):
    """Every chunk was embedded and stored."""

    ok: Literal[True] = True
    collection_id: UUID = Field(description="Collection holding the stored vectors")
    rows_processed: int = Field(default=0, description="Database rows read (imports only)")
    chunks_created: int = Field(description="Number of chunks produced")
    embeddings_stored: int = Field(description="Number of vectors written")
    processing_time_ms: float = Field(default=0.0, description="Wall time in milliseconds")


class IngestionFailure(BaseModel):
    """Ingestion aborted; vectors already written stay in place."""

    ok: Literal[False] = False
    error: str = Field(description="Failure message, recorded verbatim on the job")
    error_type: str = Field(default="VectorHubError", description="Exception class name")
    collection_id: UUID | None = Field(default=None, description="Collection, if one was created")
    rows_processed: int = 0
    chunks_created: int = 0
    embeddings_stored: int = 0


IngestionResult = Union[IngestionSuccess, IngestionFailure]
