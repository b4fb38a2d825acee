"""
Configuration settings for the embedding ingestion pipeline.

Provides environment-based configuration for chunking, streaming reads,
batched vector writes and database imports.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import SettingsConfigDict

from vectorhub.configs.base import BaseSettings

MIB = 1024 * 1024


class DatabaseConnection(BaseModel):
    """An external database that database imports may read from."""

    url: str = Field(min_length=1, description="SQLAlchemy URL of the external database")
    owners: list[str] | None = Field(
        default=None,
        description="Owners allowed to import from this connection (any owner when omitted)",
    )

    def allows(self, owner: str) -> bool:
        return self.owners is None or owner in self.owners


class IngestionSettings(BaseSettings):
    """Settings for the embedding ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking defaults
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Default chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Default overlap between consecutive chunks",
    )

    # Streaming reads
    stream_threshold_bytes: int = Field(
        default=10 * MIB,
        description="Files larger than this are read in slices",
    )
    stream_slice_bytes: int = Field(
        default=1 * MIB,
        gt=0,
        description="Slice size for streamed reads",
    )

    # Writes
    write_batch_size: int = Field(
        default=10,
        gt=0,
        le=10,
        description="Maximum vectors written per store call",
    )
    max_file_size_bytes: int = Field(
        default=100 * MIB,
        description="Upload size limit per file",
    )

    # Database imports
    database_page_size: int = Field(
        default=1000,
        gt=0,
        description="Rows fetched per page during database imports",
    )
    database_connections: dict[str, DatabaseConnection] = Field(
        default_factory=dict,
        description="Connection registry for database imports, keyed by connection id (JSON)",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self
