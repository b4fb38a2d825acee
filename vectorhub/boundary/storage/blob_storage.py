"""
Blob storage for raw uploaded files.

Defines the BlobStorage protocol read by the ingestion pipeline and two
implementations: S3 (deployed environments) and a local directory
(development). The pipeline reads files by key only.

Dependencies: boto3
System role: Raw file storage boundary
"""

import logging
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import ClientError

from vectorhub.core.exceptions import NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class BlobStorage(Protocol):
    """Byte-addressable file storage."""

    def size(self, key: str) -> int: ...

    def read_range(self, key: str, start: int, length: int) -> bytes: ...

    def read(self, key: str) -> bytes: ...

    def write(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None: ...

    def delete(self, key: str) -> None: ...


class S3BlobStorage:
    """S3-backed blob storage using ranged GETs for streamed reads."""

    def __init__(self, bucket: str, region: str = "ap-southeast-2", client=None) -> None:
        """
        Initialize S3 blob storage.

        Args:
            bucket: S3 bucket name for raw uploads
            region: AWS region for S3 bucket
            client: Pre-built boto3 S3 client (created when omitted)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    def _raise_for(self, e: ClientError, key: str, action: str) -> None:
        code = e.response.get("Error", {}).get("Code", "")
        if code in ("404", "NoSuchKey", "NotFound"):
            raise NotFoundError("file", key) from e
        logger.error(f"{__name__}:{action} - ClientError for {key}: {e}")
        raise UpstreamError(
            f"Blob storage {action} failed for {key}",
            service="storage",
            details={"code": code},
        ) from e

    def size(self, key: str) -> int:
        try:
            response = self._s3_client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            self._raise_for(e, key, "size")
        return int(response["ContentLength"])

    def read_range(self, key: str, start: int, length: int) -> bytes:
        """Read `length` bytes starting at `start` with an HTTP Range request."""
        if length <= 0:
            return b""
        try:
            response = self._s3_client.get_object(
                Bucket=self._bucket,
                Key=key,
                Range=f"bytes={start}-{start + length - 1}",
            )
        except ClientError as e:
            self._raise_for(e, key, "read_range")
        return response["Body"].read()

    def read(self, key: str) -> bytes:
        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            self._raise_for(e, key, "read")
        return response["Body"].read()

    def write(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            self._raise_for(e, key, "write")
        logger.info(f"{__name__}:write - Uploaded {len(data)} bytes to s3://{self._bucket}/{key}")

    def delete(self, key: str) -> None:
        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            self._raise_for(e, key, "delete")


class LocalBlobStorage:
    """Directory-backed blob storage for development and tests."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root not in path.parents and path != self._root:
            raise ValidationError(f"Invalid blob key: {key}", field="key")
        return path

    def _existing(self, key: str) -> Path:
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError("file", key)
        return path

    def size(self, key: str) -> int:
        return self._existing(key).stat().st_size

    def read_range(self, key: str, start: int, length: int) -> bytes:
        with self._existing(key).open("rb") as f:
            f.seek(start)
            return f.read(length)

    def read(self, key: str) -> bytes:
        return self._existing(key).read_bytes()

    def write(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug(f"{__name__}:write - Wrote {len(data)} bytes to {path}")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
