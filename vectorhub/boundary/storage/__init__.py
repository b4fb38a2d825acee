"""
Blob storage boundary for raw uploaded files.
"""

from vectorhub.boundary.storage.blob_storage import BlobStorage, LocalBlobStorage, S3BlobStorage
from vectorhub.boundary.storage.storage_factory import get_blob_storage

__all__ = ["BlobStorage", "LocalBlobStorage", "S3BlobStorage", "get_blob_storage"]
