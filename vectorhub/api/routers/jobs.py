"""
Job API endpoints.

Routes: POST /jobs, GET /jobs, GET /jobs/{id}, POST /jobs/{id}/cancel,
POST /jobs/{id}/retry

Dependencies: vectorhub.application.services.job_service, vectorhub.models
System role: Job queue HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from vectorhub.api.deps import get_job_service
from vectorhub.application.services.job_service import JobService
from vectorhub.models.job import (
    CreateJobRequest,
    JobCreatedResponse,
    JobListResponse,
    JobResponse,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobCreatedResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_job(
    request: CreateJobRequest,
    job_service: JobService = Depends(get_job_service),
) -> JobCreatedResponse:
    """
    Create an ingestion job and start processing it in the background.

    Returns immediately; poll GET /jobs/{id} for progress.

    Raises:
        ValidationError (400): Unknown job type or malformed parameters
    """
    job_id = await job_service.create_job(request.job_type, request.parameters, request.owner)
    await job_service.trigger_processing(job_id)
    return JobCreatedResponse(job_id=job_id)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    owner: str = Query(min_length=1),
    limit: int = Query(default=50, gt=0, le=500),
    job_service: JobService = Depends(get_job_service),
) -> JobListResponse:
    """List an owner's jobs, newest first."""
    jobs = await job_service.list_jobs(owner, limit=limit)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        total=len(jobs),
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job_status(
    job_id: UUID,
    owner: str = Query(min_length=1),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Get job status and progress for polling.

    result carries message, progress (0-100), rowsProcessed, chunksCreated
    and embeddingsStored; error is set once the job has failed.

    Raises:
        NotFoundError (404): Job not found for owner

    Example Response:
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "job_type": "text_input",
            "status": "completed",
            "result": {
                "message": "Successfully created embeddings",
                "progress": 100,
                "rowsProcessed": 0,
                "chunksCreated": 15,
                "embeddingsStored": 15
            },
            "error": null,
            "owner": "user-1",
            ...
        }
    """
    job = await job_service.get_job_status(job_id, owner)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/cancel", response_model=JobResponse)
async def cancel_job(
    job_id: UUID,
    owner: str = Query(min_length=1),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Cancel a pending job.

    Raises:
        NotFoundError (404): Job not found for owner
        InvalidStateError (409): Job is not pending
    """
    job = await job_service.cancel_job(job_id, owner)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/retry", response_model=JobResponse)
async def retry_job(
    job_id: UUID,
    owner: str = Query(min_length=1),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Re-queue a failed job.

    Raises:
        NotFoundError (404): Job not found for owner
        InvalidStateError (409): Job is not failed
    """
    job = await job_service.retry_job(job_id, owner)
    return JobResponse.model_validate(job)
