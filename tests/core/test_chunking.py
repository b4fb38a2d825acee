"""
Test suite for the sliding-window chunker.

System role: Verification of chunk counts, coverage and parameter checks
"""

import math

import pytest

from vectorhub.core.exceptions import ValidationError
from vectorhub.core.ingestion.models import ChunkingConfig
from vectorhub.core.ingestion.tasks import ChunkingTask
from vectorhub.core.ingestion.tasks.chunking_task import split_text


def _expected_count(length: int, size: int, overlap: int) -> int:
    if length > overlap:
        return math.ceil((length - overlap) / (size - overlap))
    return 1


def _reassemble(chunks, overlap: int) -> str:
    text = chunks[0].text
    for chunk in chunks[1:]:
        text += chunk.text[overlap:]
    return text


class TestSplitTextCounts:
    """Chunk count follows ceil((L - O) / (S - O))."""

    def test_twelve_thousand_characters_should_yield_fifteen_chunks(self) -> None:
        # Arrange
        text = "abcdefghij" * 1200

        # Act
        chunks = split_text(text, chunk_size=1000, chunk_overlap=200)

        # Assert
        assert len(chunks) == 15 == _expected_count(12000, 1000, 200)
        assert chunks[-1].start_offset == 11200
        assert chunks[-1].end_offset == 12000

    @pytest.mark.parametrize(
        "length,size,overlap",
        [(0, 10, 0), (5, 10, 3), (10, 10, 3), (11, 10, 3), (25, 10, 0), (101, 7, 6), (3, 10, 5)],
    )
    def test_count_and_coverage_should_hold(self, length: int, size: int, overlap: int) -> None:
        # Arrange
        text = "".join(chr(97 + i % 26) for i in range(length))

        # Act
        chunks = split_text(text, chunk_size=size, chunk_overlap=overlap)

        # Assert
        assert len(chunks) == _expected_count(length, size, overlap)
        assert _reassemble(chunks, overlap) == text
        assert [c.index for c in chunks] == list(range(len(chunks)))

    def test_short_text_should_yield_single_untrimmed_chunk(self) -> None:
        chunks = split_text("  hello  ", chunk_size=100, chunk_overlap=10)

        assert len(chunks) == 1
        assert chunks[0].text == "  hello  "
        assert chunks[0].start_offset == 0

    def test_chunks_should_carry_source(self) -> None:
        chunks = split_text("x" * 30, chunk_size=10, chunk_overlap=2, source="notes.txt")

        assert {c.source for c in chunks} == {"notes.txt"}

    def test_output_should_be_deterministic(self) -> None:
        text = "The quick brown fox jumps over the lazy dog. " * 40

        first = split_text(text, 64, 16)
        second = split_text(text, 64, 16)

        assert first == second


class TestChunkingValidation:
    """Invalid window parameters raise ValidationError."""

    @pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (10, 10), (10, 11), (10, -1)])
    def test_split_text_should_reject_bad_parameters(self, size: int, overlap: int) -> None:
        with pytest.raises(ValidationError):
            split_text("some text", chunk_size=size, chunk_overlap=overlap)

    def test_config_should_raise_service_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ChunkingConfig(chunk_size=100, chunk_overlap=100)

        assert exc_info.value.field is not None

    def test_chunking_task_should_use_config(self) -> None:
        # Arrange
        task = ChunkingTask(ChunkingConfig(chunk_size=4, chunk_overlap=1))

        # Act
        chunks = task.chunk("abcdefghij", source="s")

        # Assert
        assert [c.text for c in chunks] == ["abcd", "defg", "ghij"]
