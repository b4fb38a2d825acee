"""
Job CRUD operations.

Provides Create, Read, Update operations for JobModel with owner-scoped
lookups and the guarded status transition used by the job queue.

Dependencies: sqlalchemy, vectorhub.boundary.db.models.job_model
System role: Job persistence operations for async ingestion tracking
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vectorhub.boundary.db.CRUD.base_crud import BaseCRUD
from vectorhub.boundary.db.models.job_model import JobModel, JobStatus, can_transition


class JobCRUD(BaseCRUD[JobModel]):
    """
    CRUD operations for JobModel.

    Extends BaseCRUD with owner-scoped queries and a compare-and-set status
    transition. Transitions never read-then-write: the expected current
    status is part of the UPDATE's WHERE clause, so exactly one of several
    concurrent callers wins.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner: str,
    ) -> JobModel | None:
        """
        Retrieve job by ID when it belongs to owner.

        Args:
            session: Async database session
            id: Job UUID
            owner: Owning user identifier

        Returns:
            JobModel if found and owned, None otherwise
        """
        stmt = select(JobModel).where(JobModel.id == id, JobModel.owner == owner)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner: str,
        limit: int | None = 50,
    ) -> Sequence[JobModel]:
        """
        Retrieve an owner's jobs, newest first.

        Args:
            session: Async database session
            owner: Owning user identifier
            limit: Maximum number of jobs to return

        Returns:
            Sequence of JobModels
        """
        stmt = (
            select(JobModel)
            .where(JobModel.owner == owner)
            .order_by(JobModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def transition(
        self,
        session: AsyncSession,
        id: UUID,
        from_statuses: Iterable[JobStatus],
        to_status: JobStatus,
        **fields: Any,
    ) -> JobModel | None:
        """
        Move a job to `to_status` only if it is currently in `from_statuses`.

        Args:
            session: Async database session
            id: Job UUID
            from_statuses: Statuses the job must currently be in
            to_status: Target status
            **fields: Extra columns to write in the same statement

        Returns:
            Updated JobModel if the guard matched, None otherwise

        Raises:
            ValueError: If a from->to pair is not part of the state machine
        """
        allowed = [
            status for status in from_statuses
            if status == to_status or can_transition(status, to_status)
        ]
        if not allowed:
            raise ValueError(f"No legal transition into {to_status.value}")

        stmt = (
            update(JobModel)
            .where(JobModel.id == id, JobModel.status.in_(allowed))
            .values(status=to_status, **fields)
            .returning(JobModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_result(
        self,
        session: AsyncSession,
        id: UUID,
        result_data: dict,
        expected_status: JobStatus = JobStatus.PROCESSING,
    ) -> JobModel | None:
        """
        Replace the result payload while the job is in `expected_status`.

        Args:
            session: Async database session
            id: Job UUID
            result_data: New result payload
            expected_status: Status the job must be in for the write to apply

        Returns:
            Updated JobModel if the guard matched, None otherwise
        """
        return await self.transition(
            session, id, [expected_status], expected_status, result=result_data
        )


job_crud = JobCRUD()
