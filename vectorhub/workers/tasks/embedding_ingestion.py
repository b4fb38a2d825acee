"""
Embedding ingestion job runner.

Processes one claimed job: rebuilds its sources from the stored
parameters, runs the embedding pipeline with progress reporting, and
records the outcome on the job. This is the failure boundary of the job
queue: nothing raised here reaches the caller that triggered the job.

Dependencies: vectorhub.core.ingestion, vectorhub.core.job_tracker, vectorhub.boundary.db
System role: Background job processing
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vectorhub.boundary.db.base import utcnow
from vectorhub.boundary.db.CRUD.job_crud import job_crud
from vectorhub.boundary.db.models.job_model import JobStatus
from vectorhub.configs.ingestion import IngestionSettings
from vectorhub.core.exceptions import VectorHubError
from vectorhub.core.ingestion.entrypoint import EmbeddingPipeline
from vectorhub.core.ingestion.models import IngestionSuccess, parse_job_parameters
from vectorhub.core.job_tracker import JobTracker
from vectorhub.observability.log_utils import log_exception_with_context
from vectorhub.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)


class IngestionJobRunner:
    """Run embedding ingestion for jobs claimed by JobService."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        pipeline: EmbeddingPipeline,
        settings: IngestionSettings,
    ) -> None:
        self._session_factory = session_factory
        self._pipeline = pipeline
        self._settings = settings

    async def __call__(self, job_id: UUID) -> None:
        await self.run(job_id)

    async def run(self, job_id: UUID) -> None:
        """
        Process a job that is already in the processing state.

        Args:
            job_id: Job to process
        """
        set_correlation_id(f"job-{job_id}")
        try:
            await self._process(job_id)
        except Exception as e:
            log_exception_with_context(
                logger, f"{__name__}:run - Job processing crashed", e, job_id=job_id
            )
            message = e.message if isinstance(e, VectorHubError) else f"{type(e).__name__}: {e}"
            try:
                await self._fail(job_id, message, {})
            except Exception:
                logger.exception(
                    f"{__name__}:run - Could not record failure",
                    extra={"job_id": str(job_id)},
                )
        finally:
            clear_correlation_id()

    async def _process(self, job_id: UUID) -> None:
        async with self._session_factory() as session:
            job = await job_crud.get_by_id(session, job_id)

        if job is None:
            logger.warning(f"{__name__}:_process - Job not found", extra={"job_id": str(job_id)})
            return
        if job.status != JobStatus.PROCESSING:
            logger.warning(
                f"{__name__}:_process - Job is {job.status.value}, not processing",
                extra={"job_id": str(job_id)},
            )
            return

        logger.info(
            f"{__name__}:_process - Starting {job.job_type.value} job",
            extra={"job_id": str(job_id), "owner": job.owner},
        )

        params = parse_job_parameters(job.job_type.value, job.parameters or {})
        chunking = params.chunking(self._settings.chunk_size, self._settings.chunk_overlap)

        tracker = JobTracker(self._session_factory, job_id)
        await tracker.update({"message": "Reading input...", "progress": 0})

        result = await self._pipeline.ingest(
            params.sources(),
            chunking,
            collection_name=params.collection_name,
            owner=job.owner,
            model_id=params.model_id,
            description=params.description,
            job_id=job_id,
            progress=tracker.update,
        )

        counters = {
            "rowsProcessed": result.rows_processed,
            "chunksCreated": result.chunks_created,
            "embeddingsStored": result.embeddings_stored,
        }
        if isinstance(result, IngestionSuccess):
            await self._complete(job_id, tracker, counters, result)
        else:
            if result.collection_id is not None:
                counters["collectionId"] = str(result.collection_id)
            await self._fail(job_id, result.error, {**tracker.result, **counters})

    async def _complete(
        self,
        job_id: UUID,
        tracker: JobTracker,
        counters: dict,
        result: IngestionSuccess,
    ) -> None:
        async with self._session_factory() as session:
            job = await job_crud.transition(
                session,
                job_id,
                [JobStatus.PROCESSING],
                JobStatus.COMPLETED,
                error=None,
                result={
                    **tracker.result,
                    **counters,
                    "message": "Successfully created embeddings",
                    "progress": 100,
                    "collectionId": str(result.collection_id),
                    "processingTimeMs": round(result.processing_time_ms, 2),
                    "completedAt": utcnow().isoformat(),
                },
            )
            await session.commit()

        if job is None:
            logger.warning(
                f"{__name__}:_complete - Job left processing before completion",
                extra={"job_id": str(job_id)},
            )
            return
        logger.info(
            f"{__name__}:_complete - Job completed",
            extra={"job_id": str(job_id), **counters},
        )

    async def _fail(self, job_id: UUID, error: str, result: dict) -> None:
        async with self._session_factory() as session:
            job = await job_crud.transition(
                session,
                job_id,
                [JobStatus.PROCESSING],
                JobStatus.FAILED,
                error=error,
                result={
                    **result,
                    "message": f"Failed: {error}",
                    "failedAt": utcnow().isoformat(),
                },
            )
            await session.commit()

        if job is None:
            logger.warning(
                f"{__name__}:_fail - Job left processing before failure was recorded",
                extra={"job_id": str(job_id)},
            )
            return
        logger.warning(
            f"{__name__}:_fail - Job failed: {error}",
            extra={"job_id": str(job_id)},
        )
