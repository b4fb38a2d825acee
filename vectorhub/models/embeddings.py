"""
Embedding ingestion and collection schemas.

Dependencies: pydantic
System role: Embedding API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IngestionOptions(BaseModel):
    """Options shared by every ingestion request."""

    owner: str = Field(min_length=1)
    collection_name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    model_id: str | None = None
    chunk_size: int | None = Field(default=None, description="Characters per chunk")
    chunk_overlap: int | None = Field(default=None, description="Characters shared by neighbors")

    def job_options(self) -> dict[str, Any]:
        """Options as job parameters, without the owner."""
        return self.model_dump(exclude={"owner"}, exclude_none=True)


class TextIngestionRequest(IngestionOptions):
    text: str = Field(min_length=1)


class DatabaseIngestionRequest(IngestionOptions):
    model_config = ConfigDict(extra="forbid")

    connection_id: str = Field(min_length=1, description="Id of a registered database connection")
    query: str = Field(min_length=1)
    columns: list[str] | None = None


class IngestionSubmittedResponse(BaseModel):
    job_id: uuid.UUID
    message: str = "Ingestion job created"


class CollectionResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    model_id: str
    dimension: int | None = None
    vector_count: int = 0
    job_id: uuid.UUID | None = None
    created_at: datetime | None = None


class CollectionListResponse(BaseModel):
    collections: list[CollectionResponse]
    total: int


class UpdateMetadataRequest(BaseModel):
    owner: str = Field(min_length=1)
    metadata: dict[str, Any]
    merge: bool = Field(default=True, description="Merge into existing metadata instead of replacing")


class VectorResponse(BaseModel):
    id: uuid.UUID
    collection_id: uuid.UUID
    source_type: str
    source_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    dimension: int
    created_at: datetime | None = None
