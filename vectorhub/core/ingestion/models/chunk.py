"""
Chunk domain models for the embedding ingestion pipeline.

DocumentChunk is ephemeral: it lives between chunking and embedding and is
never persisted on its own (its text travels in the vector's metadata).

Dependencies: pydantic
System role: Data structures for chunking
"""

from pydantic import BaseModel, Field, model_validator

from vectorhub.core.exceptions import ValidationError


class DocumentChunk(BaseModel):
    """Contiguous span of a source text."""

    text: str = Field(description="Chunk text span")
    start_offset: int = Field(ge=0, description="Character offset of the span in the source text")
    source: str = Field(default="", description="File name or logical source")
    index: int = Field(ge=0, description="Sequence index within the source")

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.text)


class ChunkingConfig(BaseModel):
    """
    Sliding-window parameters.

    Constraints: chunk_size > 0 and 0 <= chunk_overlap < chunk_size. Violations
    raise the service's ValidationError rather than pydantic's.
    """

    chunk_size: int = 1000
    chunk_overlap: int = 200

    @model_validator(mode="before")
    @classmethod
    def _check_bounds(cls, data):
        if not isinstance(data, dict):
            return data
        size = data.get("chunk_size", 1000)
        overlap = data.get("chunk_overlap", 200)
        validate_chunking(size, overlap)
        return data

    @property
    def stride(self) -> int:
        return self.chunk_size - self.chunk_overlap


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    """
    Check sliding-window parameters.

    Raises:
        ValidationError: If chunk_size <= 0 or overlap is outside [0, chunk_size)
    """
    if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size <= 0:
        raise ValidationError(
            f"chunk_size must be a positive integer, got {chunk_size!r}",
            field="chunk_size",
        )
    if not isinstance(chunk_overlap, int) or isinstance(chunk_overlap, bool) or chunk_overlap < 0:
        raise ValidationError(
            f"chunk_overlap must be a non-negative integer, got {chunk_overlap!r}",
            field="chunk_overlap",
        )
    if chunk_overlap >= chunk_size:
        raise ValidationError(
            f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})",
            field="chunk_overlap",
        )
