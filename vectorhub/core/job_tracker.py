"""
Job progress tracker.

Writes pipeline progress into a processing job's result payload. Progress
never moves backwards: a lower value than the last one written is clamped.

Dependencies: sqlalchemy, vectorhub.boundary.db
System role: Progress accounting between the pipeline and the jobs table
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vectorhub.boundary.db.CRUD.job_crud import job_crud
from vectorhub.boundary.db.models.job_model import JobStatus

logger = logging.getLogger(__name__)


class JobTracker:
    """Monotonic progress writer for one job."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        job_id: UUID,
    ) -> None:
        self._session_factory = session_factory
        self._job_id = job_id
        self._progress = 0.0
        self._result: dict[str, Any] = {}

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def result(self) -> dict[str, Any]:
        return dict(self._result)

    async def update(self, update: dict[str, Any]) -> None:
        """
        Merge an update into the job's result and persist it.

        Only applies while the job is processing; a job moved elsewhere is
        left untouched.

        Args:
            update: Result fields (message, progress, counters)
        """
        progress = float(update.get("progress", self._progress))
        self._progress = min(100.0, max(self._progress, progress))
        self._result = {**self._result, **update, "progress": round(self._progress, 2)}

        async with self._session_factory() as session:
            job = await job_crud.update_result(
                session, self._job_id, self._result, expected_status=JobStatus.PROCESSING
            )
            await session.commit()

        if job is None:
            logger.warning(
                f"{__name__}:update - Job is no longer processing, progress not recorded",
                extra={"job_id": str(self._job_id)},
            )
