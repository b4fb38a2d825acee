"""
Embedding API endpoints.

Routes: POST /embeddings/text, POST /embeddings/files,
POST /embeddings/database, GET /embeddings/collections,
DELETE /embeddings/collections/{id}, PATCH /embeddings/vectors/{id}

Dependencies: vectorhub.application.services, vectorhub.models
System role: Ingestion and collection management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from vectorhub.api.deps import get_collection_service, get_ingestion_service
from vectorhub.application.services import CollectionService, IngestionService, UploadedFile
from vectorhub.core.exceptions import ValidationError
from vectorhub.models.common import MessageResponse
from vectorhub.models.embeddings import (
    CollectionListResponse,
    CollectionResponse,
    DatabaseIngestionRequest,
    IngestionSubmittedResponse,
    TextIngestionRequest,
    UpdateMetadataRequest,
    VectorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/embeddings", tags=["embeddings"])

UPLOAD_READ_BYTES = 1024 * 1024


async def _read_upload(upload: UploadFile, limit: int) -> bytes:
    """Read an upload in slices, stopping as soon as it passes the size limit."""
    parts: list[bytes] = []
    size = 0
    while True:
        part = await upload.read(UPLOAD_READ_BYTES)
        if not part:
            break
        size += len(part)
        if size > limit:
            raise ValidationError(
                f"File {upload.filename} exceeds the {limit // (1024 * 1024)} MiB limit",
                field="files",
                details={"filename": upload.filename, "limit_bytes": limit},
            )
        parts.append(part)
    return b"".join(parts)


@router.post("/text", response_model=IngestionSubmittedResponse, status_code=status.HTTP_202_ACCEPTED)
async def ingest_text(
    request: TextIngestionRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestionSubmittedResponse:
    """Queue inline text for chunking and embedding."""
    options = request.job_options()
    text = options.pop("text")
    job_id = await service.submit_text(request.owner, text, **options)
    return IngestionSubmittedResponse(job_id=job_id)


@router.post("/files", response_model=IngestionSubmittedResponse, status_code=status.HTTP_202_ACCEPTED)
async def ingest_files(
    owner: str = Form(..., min_length=1),
    collection_name: str = Form(..., min_length=1),
    description: str | None = Form(default=None),
    model_id: str | None = Form(default=None),
    chunk_size: int | None = Form(default=None),
    chunk_overlap: int | None = Form(default=None),
    files: list[UploadFile] = File(...),
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestionSubmittedResponse:
    """
    Upload files to blob storage and queue a file_upload job.

    Raises:
        ValidationError (400): A file exceeds the upload size limit
    """
    limit = service.max_file_size_bytes
    uploads = [
        UploadedFile(
            filename=f.filename or "upload",
            content=await _read_upload(f, limit),
            content_type=f.content_type or "application/octet-stream",
        )
        for f in files
    ]
    options = {
        "collection_name": collection_name,
        "description": description,
        "model_id": model_id,
        "chunk_size": chunk_size,
        "chunk_overlap": chunk_overlap,
    }
    job_id = await service.submit_files(
        owner, uploads, **{k: v for k, v in options.items() if v is not None}
    )
    return IngestionSubmittedResponse(job_id=job_id)


@router.post("/database", response_model=IngestionSubmittedResponse, status_code=status.HTTP_202_ACCEPTED)
async def ingest_database(
    request: DatabaseIngestionRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestionSubmittedResponse:
    """Queue a database import: every row returned by the query is embedded."""
    options = request.job_options()
    connection_id = options.pop("connection_id")
    query = options.pop("query")
    columns = options.pop("columns", None)
    job_id = await service.submit_database(
        request.owner, connection_id, query, columns=columns, **options
    )
    return IngestionSubmittedResponse(job_id=job_id)


@router.get("/collections", response_model=CollectionListResponse)
async def list_collections(
    owner: str = Query(min_length=1),
    service: CollectionService = Depends(get_collection_service),
) -> CollectionListResponse:
    collections = await service.list_collections(owner)
    return CollectionListResponse(
        collections=[CollectionResponse.model_validate(c.model_dump()) for c in collections],
        total=len(collections),
    )


@router.delete("/collections/{collection_id}", response_model=MessageResponse)
async def delete_collection(
    collection_id: UUID,
    owner: str = Query(min_length=1),
    service: CollectionService = Depends(get_collection_service),
) -> MessageResponse:
    """
    Delete a collection and all of its vectors.

    Raises:
        NotFoundError (404): Collection not found for owner
    """
    await service.delete_collection(collection_id, owner)
    return MessageResponse(message="Collection deleted")


@router.patch("/vectors/{vector_id}", response_model=VectorResponse)
async def update_vector_metadata(
    vector_id: UUID,
    request: UpdateMetadataRequest,
    service: CollectionService = Depends(get_collection_service),
) -> VectorResponse:
    """
    Update a vector's metadata.

    Raises:
        NotFoundError (404): Vector not found for owner
    """
    record = await service.update_vector_metadata(
        vector_id, request.owner, request.metadata, merge=request.merge
    )
    return VectorResponse(
        id=record.id,
        collection_id=record.collection_id,
        source_type=record.source_type,
        source_id=record.source_id,
        metadata=record.metadata,
        dimension=record.dimension,
        created_at=record.created_at,
    )
