"""
Test suite for blob storage adapters.

S3 calls are made against a mocked boto3 client.

System role: Verification of raw file storage boundaries
"""

import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from vectorhub.boundary.storage.blob_storage import LocalBlobStorage, S3BlobStorage
from vectorhub.boundary.storage.storage_factory import get_blob_storage
from vectorhub.configs.storage import StorageSettings
from vectorhub.core.exceptions import ConfigurationError, NotFoundError, UpstreamError, ValidationError


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


@pytest.fixture
def mock_s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3_storage(mock_s3_client) -> S3BlobStorage:
    return S3BlobStorage(bucket="raw-uploads", region="us-east-1", client=mock_s3_client)


class TestS3BlobStorage:
    """Test suite for S3BlobStorage."""

    def test_read_range_should_send_inclusive_range_header(self, s3_storage, mock_s3_client) -> None:
        # Arrange
        mock_s3_client.get_object.return_value = {"Body": io.BytesIO(b"abcd")}

        # Act
        data = s3_storage.read_range("k", start=10, length=4)

        # Assert
        assert data == b"abcd"
        mock_s3_client.get_object.assert_called_once_with(
            Bucket="raw-uploads", Key="k", Range="bytes=10-13"
        )

    def test_size_should_use_head_object(self, s3_storage, mock_s3_client) -> None:
        mock_s3_client.head_object.return_value = {"ContentLength": 2048}

        assert s3_storage.size("k") == 2048

    def test_missing_key_should_raise_not_found(self, s3_storage, mock_s3_client) -> None:
        mock_s3_client.get_object.side_effect = _client_error("NoSuchKey")

        with pytest.raises(NotFoundError):
            s3_storage.read("missing")

    def test_other_client_errors_should_raise_upstream(self, s3_storage, mock_s3_client) -> None:
        mock_s3_client.put_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(UpstreamError) as exc_info:
            s3_storage.write("k", b"data")

        assert exc_info.value.details["service"] == "storage"


class TestLocalBlobStorage:
    """Test suite for LocalBlobStorage."""

    def test_write_then_read_range(self, tmp_path) -> None:
        storage = LocalBlobStorage(tmp_path)
        storage.write("a/b.txt", b"0123456789")

        assert storage.size("a/b.txt") == 10
        assert storage.read_range("a/b.txt", 3, 4) == b"3456"

    def test_key_escaping_root_should_be_rejected(self, tmp_path) -> None:
        storage = LocalBlobStorage(tmp_path / "root")

        with pytest.raises(ValidationError):
            storage.write("../outside.txt", b"x")


class TestStorageFactory:
    """Test suite for get_blob_storage()."""

    def test_s3_without_bucket_should_raise(self) -> None:
        settings = StorageSettings(_env_file=None, backend="s3", bucket="")

        with pytest.raises(ConfigurationError):
            get_blob_storage(settings)

    def test_local_backend_should_use_local_root(self, tmp_path) -> None:
        settings = StorageSettings(_env_file=None, backend="local", local_root=str(tmp_path))

        assert isinstance(get_blob_storage(settings), LocalBlobStorage)
