"""
Models for the embedding ingestion pipeline.
"""

from .chunk import ChunkingConfig, DocumentChunk, validate_chunking
from .ingestion_result import IngestionFailure, IngestionResult, IngestionSuccess
from .sources import (
    DatabaseImportParameters,
    DatabaseSource,
    FileSource,
    FileUploadParameters,
    IngestionParameters,
    JobParameters,
    Source,
    TextInputParameters,
    TextSource,
    parse_job_parameters,
    source_type_for_filename,
)

__all__ = [
    "ChunkingConfig",
    "DocumentChunk",
    "validate_chunking",
    "IngestionFailure",
    "IngestionResult",
    "IngestionSuccess",
    "DatabaseImportParameters",
    "DatabaseSource",
    "FileSource",
    "FileUploadParameters",
    "IngestionParameters",
    "JobParameters",
    "Source",
    "TextInputParameters",
    "TextSource",
    "parse_job_parameters",
    "source_type_for_filename",
]
