"""
Text chunking task.

Splits text into fixed-size character windows that overlap by a fixed
amount. Window starts advance by chunk_size - chunk_overlap; the last
window is truncated to the remaining text and never padded.

Dependencies: vectorhub.core.ingestion.models
System role: Chunking stage of the embedding ingestion pipeline
"""

from ..models import ChunkingConfig, DocumentChunk, validate_chunking


def split_text(
    text: str,
    chunk_size: int,
    chunk_overlap: int,
    source: str = "",
) -> list[DocumentChunk]:
    """
    Split text into overlapping windows.

    Stops at the first window that reaches the end of the text, so a text of
    length L yields ceil((L - O) / (S - O)) chunks when L > O and exactly one
    chunk otherwise.

    Args:
        text: Text to split
        chunk_size: Window length in characters
        chunk_overlap: Characters shared by consecutive windows
        source: Source identifier stamped on every chunk

    Returns:
        list[DocumentChunk]: Chunks in text order

    Raises:
        ValidationError: If chunk_size <= 0 or overlap is outside [0, chunk_size)
    """
    validate_chunking(chunk_size, chunk_overlap)

    length = len(text)
    stride = chunk_size - chunk_overlap
    chunks: list[DocumentChunk] = []
    offset = 0

    while True:
        end = min(offset + chunk_size, length)
        chunks.append(
            DocumentChunk(
                text=text[offset:end],
                start_offset=offset,
                source=source,
                index=len(chunks),
            )
        )
        if end >= length:
            break
        offset += stride

    return chunks


class ChunkingTask:
    """Split texts using one chunking configuration."""

    def __init__(self, config: ChunkingConfig) -> None:
        """
        Initialize chunking task.

        Args:
            config: Validated chunk size and overlap
        """
        self._config = config

    @property
    def config(self) -> ChunkingConfig:
        return self._config

    def chunk(self, text: str, source: str = "") -> list[DocumentChunk]:
        """
        Split one text into chunks.

        Args:
            text: Text to split
            source: Source identifier for the chunks

        Returns:
            list[DocumentChunk]: Chunks in text order
        """
        return split_text(
            text,
            self._config.chunk_size,
            self._config.chunk_overlap,
            source=source,
        )
