"""
Job request/response schemas.

Dependencies: pydantic
System role: Job queue API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vectorhub.boundary.db.models.job_model import JobStatus, JobType


class CreateJobRequest(BaseModel):
    """Request schema for creating an ingestion job."""

    job_type: JobType = Field(description="file_upload, text_input or database_import")
    parameters: dict[str, Any] = Field(default_factory=dict, description="Job-type specific payload")
    owner: str = Field(min_length=1, description="Owning user identifier")


class JobCreatedResponse(BaseModel):
    job_id: uuid.UUID
    status: JobStatus = JobStatus.PENDING


class JobResponse(BaseModel):
    """Job status as seen by polling clients."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    job_type: JobType
    status: JobStatus
    parameters: dict[str, Any] = Field(default_factory=dict)
    result: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    owner: str
    created_at: datetime
    updated_at: datetime


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    total: int
