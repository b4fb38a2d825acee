"""
Embedding model provider boundary.
"""

from vectorhub.boundary.embeddings.embedding_provider import (
    EmbeddingProvider,
    LangChainEmbeddingProvider,
)

__all__ = ["EmbeddingProvider", "LangChainEmbeddingProvider"]
