"""
Ingestion sources and per-job-type parameter schemas.

A job's `parameters` payload is validated into one of the *Parameters
models when the job is created; the worker turns it back into sources when
the job runs.

Dependencies: pydantic
System role: Input contracts for the ingestion pipeline
"""

from pathlib import PurePosixPath
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from vectorhub.core.exceptions import ValidationError
from vectorhub.core.ingestion.models.chunk import ChunkingConfig

CODE_EXTENSIONS = frozenset({
    ".py", ".js", ".ts", ".tsx", ".jsx", ".java", ".go", ".rs", ".rb",
    ".c", ".h", ".cpp", ".cs", ".php", ".sql", ".sh", ".kt", ".swift",
})


def source_type_for_filename(filename: str) -> str:
    """Classify an uploaded file as "code" or "document" by extension."""
    suffix = PurePosixPath(filename).suffix.lower()
    return "code" if suffix in CODE_EXTENSIONS else "document"


class TextSource(BaseModel):
    """Inline text."""

    text: str
    source_id: str = "text_input"
    source_type: str = "text"


class FileSource(BaseModel):
    """File held in blob storage."""

    key: str = Field(description="Blob storage key")
    filename: str = Field(description="Original file name")
    size_bytes: int | None = Field(default=None, ge=0)

    @property
    def source_id(self) -> str:
        return self.filename

    @property
    def source_type(self) -> str:
        return source_type_for_filename(self.filename)


class DatabaseSource(BaseModel):
    """Rows returned by a query against an external database."""

    connection_id: str = Field(min_length=1, description="Id of a registered database connection")
    query: str = Field(min_length=1)
    columns: list[str] | None = Field(default=None, description="Columns to render (all when omitted)")
    source_id: str = "database_import"
    source_type: str = "database"


Source = Union[TextSource, FileSource, DatabaseSource]


class IngestionParameters(BaseModel):
    """Options shared by every ingestion job type."""

    collection_name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    model_id: str | None = None
    chunk_size: int | None = None
    chunk_overlap: int | None = None

    def chunking(self, default_size: int, default_overlap: int) -> ChunkingConfig:
        """Resolve chunking parameters against defaults; raises ValidationError."""
        return ChunkingConfig(
            chunk_size=self.chunk_size if self.chunk_size is not None else default_size,
            chunk_overlap=self.chunk_overlap if self.chunk_overlap is not None else default_overlap,
        )


class TextInputParameters(IngestionParameters):
    text: str = Field(min_length=1)
    source_id: str = "text_input"

    def sources(self) -> list[Source]:
        return [TextSource(text=self.text, source_id=self.source_id)]


class FileUploadParameters(IngestionParameters):
    files: list[FileSource] = Field(min_length=1)

    def sources(self) -> list[Source]:
        return list(self.files)


class DatabaseImportParameters(IngestionParameters):
    """Import rows from a registered database; raw connection URLs are refused."""

    model_config = ConfigDict(extra="forbid")

    connection_id: str = Field(min_length=1, max_length=255)
    query: str = Field(min_length=1)
    columns: list[str] | None = None
    source_id: str = "database_import"

    def sources(self) -> list[Source]:
        return [
            DatabaseSource(
                connection_id=self.connection_id,
                query=self.query,
                columns=self.columns,
                source_id=self.source_id,
            )
        ]


JobParameters = Union[TextInputParameters, FileUploadParameters, DatabaseImportParameters]

PARAMETER_MODELS: dict[str, type[IngestionParameters]] = {
    "text_input": TextInputParameters,
    "file_upload": FileUploadParameters,
    "database_import": DatabaseImportParameters,
}


def parse_job_parameters(job_type: str, parameters: dict[str, Any]) -> JobParameters:
    """
    Validate a job's parameters payload for its type.

    Raises:
        ValidationError: Unknown job type or malformed parameters
    """
    model = PARAMETER_MODELS.get(str(job_type))
    if model is None:
        raise ValidationError(
            f"Unknown job type: {job_type}",
            field="job_type",
            details={"allowed": sorted(PARAMETER_MODELS)},
        )
    try:
        parsed = model.model_validate(parameters or {})
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid parameters for {job_type}",
            field="parameters",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
    return parsed
