"""
Job service orchestrator.

The job queue: creates ingestion jobs, claims them for processing, and
handles cancel and retry. Every status change is a guarded transition, so
a job is never processed twice and cancel/retry cannot race a worker.

Dependencies: vectorhub.boundary.db.CRUD, vectorhub.boundary.db.models
System role: Job management orchestration
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vectorhub.boundary.db.base import utcnow
from vectorhub.boundary.db.CRUD.job_crud import job_crud
from vectorhub.boundary.db.models.job_model import JobModel, JobStatus, JobType
from vectorhub.configs.ingestion import IngestionSettings
from vectorhub.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from vectorhub.core.ingestion.models import DatabaseImportParameters, JobParameters, parse_job_parameters
from vectorhub.core.ingestion.tasks.database_task import resolve_connection

logger = logging.getLogger(__name__)

JobRunner = Callable[[UUID], Awaitable[None]]


class JobService:
    """
    Job service orchestrator.

    Owns the background tasks it spawns; call drain() on shutdown (and in
    tests) to wait for them.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        runner: JobRunner | None = None,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize job service.

        Args:
            session_factory: Factory for short-lived database sessions
            runner: Coroutine that processes a claimed job
            settings: Chunking defaults used to validate new jobs
        """
        self._session_factory = session_factory
        self._runner = runner
        self._settings = settings or IngestionSettings()
        self._tasks: set[asyncio.Task] = set()

    def validate_job(
        self,
        job_type: JobType | str,
        parameters: dict[str, Any],
        owner: str,
    ) -> tuple[JobType, JobParameters]:
        """
        Check a job request without persisting anything.

        Raises:
            ValidationError: Unknown job type, malformed parameters or chunking
            NotFoundError: Database import names an unregistered connection
        """
        try:
            job_type = JobType(job_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown job type: {job_type}",
                field="job_type",
                details={"allowed": [t.value for t in JobType]},
            ) from e
        if not owner:
            raise ValidationError("owner is required", field="owner")

        params = parse_job_parameters(job_type.value, parameters)
        params.chunking(self._settings.chunk_size, self._settings.chunk_overlap)
        if isinstance(params, DatabaseImportParameters):
            resolve_connection(self._settings.database_connections, params.connection_id, owner)
        return job_type, params

    async def create_job(
        self,
        job_type: JobType | str,
        parameters: dict[str, Any],
        owner: str,
    ) -> UUID:
        """
        Validate and persist a new pending job.

        Args:
            job_type: file_upload, text_input or database_import
            parameters: Job-type specific payload
            owner: Owning user identifier

        Returns:
            UUID: Created job ID

        Raises:
            ValidationError: Unknown job type, malformed parameters or chunking
            NotFoundError: Database import names an unregistered connection
        """
        job_type, params = self.validate_job(job_type, parameters, owner)

        async with self._session_factory() as session:
            job = await job_crud.create(
                session,
                job_type=job_type,
                status=JobStatus.PENDING,
                parameters=params.model_dump(mode="json", exclude_none=True),
                result={"message": "Job created", "progress": 0},
                owner=owner,
            )
            await session.commit()

        logger.info(
            f"{__name__}:create_job - Created {job_type.value} job",
            extra={"job_id": str(job.id), "owner": owner},
        )
        return job.id

    async def trigger_processing(self, job_id: UUID) -> bool:
        """
        Claim a pending job and process it in the background.

        The pending -> processing claim happens before this returns, so a
        concurrent second trigger (or a later cancel) sees the job as
        processing. Processing itself is fire-and-forget.

        Returns:
            bool: True if this call claimed the job, False if it was a no-op
        """
        async with self._session_factory() as session:
            job = await job_crud.transition(
                session,
                job_id,
                [JobStatus.PENDING],
                JobStatus.PROCESSING,
                result={"message": "Processing started", "progress": 0},
            )
            await session.commit()

        if job is None:
            logger.info(
                f"{__name__}:trigger_processing - Job not pending, skipping",
                extra={"job_id": str(job_id)},
            )
            return False

        if self._runner is None:
            logger.warning(
                f"{__name__}:trigger_processing - No runner configured",
                extra={"job_id": str(job_id)},
            )
            return True

        task = asyncio.create_task(self._run(job_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _run(self, job_id: UUID) -> None:
        try:
            await self._runner(job_id)
        except Exception:
            logger.exception(
                f"{__name__}:_run - Runner raised for job",
                extra={"job_id": str(job_id)},
            )

    async def get_job_status(self, job_id: UUID, owner: str) -> JobModel:
        """
        Get a job for polling.

        Raises:
            NotFoundError: If the job does not exist or belongs to someone else
        """
        async with self._session_factory() as session:
            job = await job_crud.get_for_owner(session, job_id, owner)
        if job is None:
            raise NotFoundError("job", job_id)
        return job

    async def list_jobs(self, owner: str, limit: int = 50) -> Sequence[JobModel]:
        """List an owner's jobs, newest first."""
        async with self._session_factory() as session:
            return await job_crud.list_for_owner(session, owner, limit=limit)

    async def cancel_job(self, job_id: UUID, owner: str) -> JobModel:
        """
        Cancel a pending job.

        Raises:
            NotFoundError: If the job does not exist for owner
            InvalidStateError: If the job is not pending
        """
        job = await self.get_job_status(job_id, owner)
        async with self._session_factory() as session:
            updated = await job_crud.transition(
                session,
                job_id,
                [JobStatus.PENDING],
                JobStatus.CANCELLED,
                result={
                    **(job.result or {}),
                    "message": "Job was cancelled",
                    "cancelledAt": utcnow().isoformat(),
                },
            )
            await session.commit()

        if updated is None:
            current = await self.get_job_status(job_id, owner)
            raise InvalidStateError(
                f"Cannot cancel job in status {current.status.value}",
                current_status=current.status.value,
                action="cancel",
            )
        logger.info(f"{__name__}:cancel_job - Job cancelled", extra={"job_id": str(job_id)})
        return updated

    async def retry_job(self, job_id: UUID, owner: str) -> JobModel:
        """
        Re-queue a failed job and trigger processing again.

        Clears the error and counters before re-queueing.

        Raises:
            NotFoundError: If the job does not exist for owner
            InvalidStateError: If the job is not failed
        """
        await self.get_job_status(job_id, owner)
        async with self._session_factory() as session:
            updated = await job_crud.transition(
                session,
                job_id,
                [JobStatus.FAILED],
                JobStatus.PENDING,
                error=None,
                result={
                    "message": "Job queued for retry",
                    "progress": 0,
                    "retriedAt": utcnow().isoformat(),
                },
            )
            await session.commit()

        if updated is None:
            current = await self.get_job_status(job_id, owner)
            raise InvalidStateError(
                f"Cannot retry job in status {current.status.value}",
                current_status=current.status.value,
                action="retry",
            )

        logger.info(f"{__name__}:retry_job - Job queued for retry", extra={"job_id": str(job_id)})
        await self.trigger_processing(job_id)
        return updated

    async def drain(self) -> None:
        """Wait for every background task spawned so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
