"""
Job ORM model.

Tracks asynchronous embedding ingestion requests (file upload, raw text,
database import) and their lifecycle state.

Dependencies: sqlalchemy, vectorhub.boundary.db.base
System role: Async job tracking for background ingestion
"""

import enum

from sqlalchemy import JSON, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vectorhub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class JobType(str, enum.Enum):
    """
    Ingestion job types.

    FILE_UPLOAD: Chunk and embed one or more uploaded files from blob storage
    TEXT_INPUT: Chunk and embed inline text
    DATABASE_IMPORT: Run a query against an external database and embed its rows
    """

    FILE_UPLOAD = "file_upload"
    TEXT_INPUT = "text_input"
    DATABASE_IMPORT = "database_import"


class JobStatus(str, enum.Enum):
    """
    Job execution states.

    PENDING: Created (or re-queued by retry), awaiting processing
    PROCESSING: Claimed by a worker; result carries live progress
    COMPLETED: Ingestion succeeded; result carries final counters
    FAILED: Ingestion failed; error carries the failure message
    CANCELLED: Cancelled while still pending (terminal)
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Allowed transitions; everything else is rejected.
JOB_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.PROCESSING, JobStatus.CANCELLED}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.FAILED: frozenset({JobStatus.PENDING}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    """Return True when the job state machine allows current -> target."""
    return target in JOB_TRANSITIONS[current]


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job ORM model for embedding ingestion requests.

    Enables caller polling (via /jobs/{id}) to show ingestion progress
    without push notifications. Status changes go through
    JobCRUD.transition so concurrent callers cannot double-process a job.

    Attributes:
        id: UUID primary key (auto-generated)
        job_type: Ingestion kind (file_upload/text_input/database_import)
        status: Current execution state
        parameters: Job-type specific payload (validated at creation)
        result: message, progress, rowsProcessed, chunksCreated, embeddingsStored
        error: Failure message, set only when status=failed
        owner: Owning user identifier
        created_at: Job creation timestamp (UTC)
        updated_at: Last status update timestamp (UTC)
    """

    __tablename__ = "jobs"

    job_type: Mapped[JobType] = mapped_column(
        Enum(JobType, native_enum=False, length=32),
        nullable=False,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, length=32),
        nullable=False,
        default=JobStatus.PENDING,
        index=True,
    )

    parameters: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Job-type specific parameters",
    )

    result: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Progress and counters",
    )

    error: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    owner: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
