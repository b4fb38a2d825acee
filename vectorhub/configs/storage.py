"""
Blob storage configuration settings.

Manages where raw uploaded files live: an S3 bucket in deployed
environments, a local directory for development.

Dependencies: pydantic, pydantic_settings
System role: Blob storage configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from vectorhub.configs.base import BaseSettings


class StorageSettings(BaseSettings):
    """Raw file storage configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOB_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["s3", "local"] = Field(
        default="local",
        description="Storage backend for uploaded files",
    )
    bucket: str = Field(
        default="",
        description="S3 bucket for raw uploads (required when backend=s3)",
    )
    region: str = Field(
        default="ap-southeast-2",
        description="AWS region for S3 bucket",
    )
    local_root: str = Field(
        default="./data/uploads",
        description="Root directory for local uploads",
    )
