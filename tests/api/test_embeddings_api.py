"""
Test suite for the embeddings router.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from vectorhub.api.deps import get_collection_service, get_ingestion_service
from vectorhub.api.routers.embeddings import UPLOAD_READ_BYTES, _read_upload
from vectorhub.boundary.vdb.vector_schemas import CollectionRecord, EmbeddingRecord
from vectorhub.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def ingestion_service(app):
    service = AsyncMock()
    service.max_file_size_bytes = 100 * 1024 * 1024
    app.dependency_overrides[get_ingestion_service] = lambda: service
    return service


@pytest.fixture
def collection_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_collection_service] = lambda: service
    return service


class TestIngestionRoutes:
    def test_text_ingestion_passes_only_given_options(self, client, ingestion_service) -> None:
        # Arrange
        job_id = uuid4()
        ingestion_service.submit_text.return_value = job_id

        # Act
        response = client.post(
            "/api/v1/embeddings/text",
            json={"owner": "alice", "collection_name": "notes", "text": "hello", "chunk_size": 500},
        )

        # Assert
        assert response.status_code == 202
        assert response.json()["job_id"] == str(job_id)
        ingestion_service.submit_text.assert_awaited_once_with(
            "alice", "hello", collection_name="notes", chunk_size=500
        )

    def test_file_upload(self, client, ingestion_service) -> None:
        ingestion_service.submit_files.return_value = uuid4()

        response = client.post(
            "/api/v1/embeddings/files",
            data={"owner": "alice", "collection_name": "docs"},
            files=[
                ("files", ("a.txt", b"first file", "text/plain")),
                ("files", ("b.md", b"# second", "text/markdown")),
            ],
        )

        assert response.status_code == 202
        args, kwargs = ingestion_service.submit_files.call_args
        owner, uploads = args
        assert owner == "alice"
        assert [(u.filename, u.content) for u in uploads] == [("a.txt", b"first file"), ("b.md", b"# second")]
        assert kwargs == {"collection_name": "docs"}

    def test_oversized_file_should_return_400(self, client, ingestion_service) -> None:
        ingestion_service.submit_files.side_effect = ValidationError(
            "File big.bin exceeds the 100 MiB limit", field="files"
        )

        response = client.post(
            "/api/v1/embeddings/files",
            data={"owner": "alice", "collection_name": "docs"},
            files=[("files", ("big.bin", b"x", "application/octet-stream"))],
        )

        assert response.status_code == 400

    def test_upload_over_limit_should_be_refused_before_submit(self, client, ingestion_service) -> None:
        ingestion_service.max_file_size_bytes = 16

        response = client.post(
            "/api/v1/embeddings/files",
            data={"owner": "alice", "collection_name": "docs"},
            files=[("files", ("big.bin", b"x" * 64, "application/octet-stream"))],
        )

        assert response.status_code == 400
        assert response.json()["details"]["filename"] == "big.bin"
        ingestion_service.submit_files.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_read_should_stop_once_limit_is_passed(self) -> None:
        # Arrange
        upload = MagicMock()
        upload.filename = "huge.bin"
        upload.read = AsyncMock(side_effect=[b"x" * UPLOAD_READ_BYTES] * 50 + [b""])

        # Act
        with pytest.raises(ValidationError):
            await _read_upload(upload, limit=2 * UPLOAD_READ_BYTES)

        # Assert
        assert upload.read.await_count == 3
        upload.read.assert_awaited_with(UPLOAD_READ_BYTES)

    def test_database_ingestion(self, client, ingestion_service) -> None:
        ingestion_service.submit_database.return_value = uuid4()

        response = client.post(
            "/api/v1/embeddings/database",
            json={
                "owner": "alice",
                "collection_name": "rows",
                "connection_id": "analytics",
                "query": "SELECT * FROM items",
                "columns": ["name", "price"],
            },
        )

        assert response.status_code == 202
        ingestion_service.submit_database.assert_awaited_once_with(
            "alice",
            "analytics",
            "SELECT * FROM items",
            columns=["name", "price"],
            collection_name="rows",
        )

    def test_database_ingestion_should_refuse_raw_connection_urls(self, client, ingestion_service) -> None:
        response = client.post(
            "/api/v1/embeddings/database",
            json={
                "owner": "alice",
                "collection_name": "rows",
                "connection_id": "analytics",
                "connection_url": "postgresql://app:secret@db/app",
                "query": "SELECT * FROM users",
            },
        )

        assert response.status_code == 422
        ingestion_service.submit_database.assert_not_called()


class TestCollectionRoutes:
    def test_list_collections(self, client, collection_service) -> None:
        collection_service.list_collections.return_value = [
            CollectionRecord(id=uuid4(), name="notes", model_id="m", dimension=8, owner="alice", vector_count=3)
        ]

        response = client.get("/api/v1/embeddings/collections", params={"owner": "alice"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["collections"][0]["vector_count"] == 3

    def test_delete_missing_collection_should_return_404(self, client, collection_service) -> None:
        collection_id = uuid4()
        collection_service.delete_collection.side_effect = NotFoundError("collection", collection_id)

        response = client.delete(f"/api/v1/embeddings/collections/{collection_id}", params={"owner": "bob"})

        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "collection"

    def test_update_vector_metadata(self, client, collection_service) -> None:
        vector_id = uuid4()
        collection_service.update_vector_metadata.return_value = EmbeddingRecord(
            id=vector_id,
            collection_id=uuid4(),
            vector=[0.1, 0.2, 0.3],
            source_type="text",
            source_id="text",
            metadata={"label": "keep"},
            owner="alice",
            created_at=datetime.now(timezone.utc),
        )

        response = client.patch(
            f"/api/v1/embeddings/vectors/{vector_id}",
            json={"owner": "alice", "metadata": {"label": "keep"}, "merge": False},
        )

        assert response.status_code == 200
        assert response.json()["dimension"] == 3
        collection_service.update_vector_metadata.assert_awaited_once_with(
            vector_id, "alice", {"label": "keep"}, merge=False
        )
