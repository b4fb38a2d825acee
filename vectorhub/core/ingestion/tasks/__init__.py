"""
Task modules for the embedding ingestion pipeline.

Exports: ChunkingTask, split_text, ReadingTask, DatabaseTask, EmbeddingTask, VectorStoreTask
"""

from .chunking_task import ChunkingTask, split_text
from .database_task import DatabaseTask, render_row, resolve_connection, to_async_url
from .embedding_task import EmbeddingTask
from .reading_task import ReadingTask
from .vector_store_task import VectorStoreTask

__all__ = [
    "ChunkingTask",
    "split_text",
    "DatabaseTask",
    "render_row",
    "resolve_connection",
    "to_async_url",
    "EmbeddingTask",
    "ReadingTask",
    "VectorStoreTask",
]
