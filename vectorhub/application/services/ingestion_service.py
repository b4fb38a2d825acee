"""
Ingestion submission service.

Front door for the three ingestion job types. Uploaded files are stored in
blob storage first so the job only carries their keys.

Dependencies: vectorhub.application.services.job_service, vectorhub.boundary.storage
System role: Ingestion request orchestration
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Sequence
from uuid import UUID

from vectorhub.application.services.job_service import JobService
from vectorhub.boundary.db.models.job_model import JobType
from vectorhub.boundary.storage.blob_storage import BlobStorage
from vectorhub.configs.ingestion import IngestionSettings
from vectorhub.core.exceptions import ConfigurationError, ValidationError, VectorHubError

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class IngestionService:
    """Create and trigger ingestion jobs."""

    def __init__(
        self,
        job_service: JobService,
        storage: BlobStorage | None,
        settings: IngestionSettings,
    ) -> None:
        self._job_service = job_service
        self._storage = storage
        self._settings = settings

    @property
    def max_file_size_bytes(self) -> int:
        return self._settings.max_file_size_bytes

    async def _submit(self, job_type: JobType, parameters: dict[str, Any], owner: str) -> UUID:
        job_id = await self._job_service.create_job(job_type, parameters, owner)
        await self._job_service.trigger_processing(job_id)
        return job_id

    async def submit_text(self, owner: str, text: str, **options: Any) -> UUID:
        """Queue inline text for embedding. Options are the shared job parameters."""
        return await self._submit(JobType.TEXT_INPUT, {"text": text, **options}, owner)

    async def submit_database(
        self,
        owner: str,
        connection_id: str,
        query: str,
        columns: list[str] | None = None,
        **options: Any,
    ) -> UUID:
        """Queue a database import from a registered connection."""
        parameters = {"connection_id": connection_id, "query": query, **options}
        if columns:
            parameters["columns"] = columns
        return await self._submit(JobType.DATABASE_IMPORT, parameters, owner)

    async def submit_files(
        self,
        owner: str,
        files: Sequence[UploadedFile],
        **options: Any,
    ) -> UUID:
        """
        Store uploaded files and queue a file upload job.

        The job is validated before any blob is written; blobs written for a
        job that then fails to persist are deleted again.

        Raises:
            ValidationError: No files, or a file over the size limit
            ConfigurationError: No blob storage configured
            UpstreamError: Storage write failed
        """
        if not files:
            raise ValidationError("At least one file is required", field="files")
        if self._storage is None:
            raise ConfigurationError("Blob storage is not configured", setting="storage")

        limit = self._settings.max_file_size_bytes
        for f in files:
            if len(f.content) > limit:
                raise ValidationError(
                    f"File {f.filename} exceeds the {limit // (1024 * 1024)} MiB limit",
                    field="files",
                    details={"filename": f.filename, "size_bytes": len(f.content)},
                )

        stored = []
        for f in files:
            name = PurePosixPath(f.filename or "upload").name
            key = f"{owner}/{uuid.uuid4()}/{name}"
            stored.append({"key": key, "filename": name, "size_bytes": len(f.content)})
        parameters = {"files": stored, **options}
        self._job_service.validate_job(JobType.FILE_UPLOAD, parameters, owner)

        written: list[str] = []
        try:
            for f, entry in zip(files, stored):
                await asyncio.to_thread(self._storage.write, entry["key"], f.content, f.content_type)
                written.append(entry["key"])
            job_id = await self._job_service.create_job(JobType.FILE_UPLOAD, parameters, owner)
        except Exception:
            await self._discard(written)
            raise

        logger.info(
            f"{__name__}:submit_files - Stored {len(stored)} files",
            extra={"owner": owner, "job_id": str(job_id)},
        )
        await self._job_service.trigger_processing(job_id)
        return job_id

    async def _discard(self, keys: list[str]) -> None:
        """Delete blobs written for a submission that did not become a job."""
        for key in keys:
            try:
                await asyncio.to_thread(self._storage.delete, key)
            except VectorHubError as e:
                logger.warning(f"{__name__}:_discard - Could not delete {key}: {e}")
