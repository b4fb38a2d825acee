"""
Embedding ingestion pipeline.

Exports: EmbeddingPipeline, ProgressCallback
"""

from .entrypoint import EmbeddingPipeline, ProgressCallback

__all__ = ["EmbeddingPipeline", "ProgressCallback"]
