"""
Blob storage factory for selecting between local (dev) and S3 (prod).

Dependencies: vectorhub.boundary.storage, vectorhub.configs
System role: Blob storage instantiation and selection
"""

import logging

from vectorhub.boundary.storage.blob_storage import BlobStorage, LocalBlobStorage, S3BlobStorage
from vectorhub.configs.storage import StorageSettings
from vectorhub.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_blob_storage(settings: StorageSettings) -> BlobStorage:
    """
    Build the blob storage configured by BLOB_BACKEND.

    Raises:
        ConfigurationError: If backend=s3 and no bucket is configured
    """
    if settings.backend == "s3":
        if not settings.bucket:
            raise ConfigurationError(
                "BLOB_BUCKET is required when BLOB_BACKEND=s3",
                setting="BLOB_BUCKET",
            )
        logger.info(f"{__name__}:get_blob_storage - Using S3 bucket {settings.bucket}")
        return S3BlobStorage(bucket=settings.bucket, region=settings.region)

    logger.info(f"{__name__}:get_blob_storage - Using local storage at {settings.local_root}")
    return LocalBlobStorage(settings.local_root)
