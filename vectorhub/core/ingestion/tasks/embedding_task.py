"""
Embedding generation task.

Calls the embedding model provider once per chunk, in chunk order.

Dependencies: vectorhub.boundary.embeddings
System role: Embedding stage of the embedding ingestion pipeline
"""

from vectorhub.boundary.embeddings.embedding_provider import EmbeddingProvider
from vectorhub.core.exceptions import UpstreamError
from ..models import DocumentChunk


class EmbeddingTask:
    """Generate one embedding per chunk with a single model."""

    def __init__(self, provider: EmbeddingProvider, model_id: str) -> None:
        """
        Initialize embedding task.

        Args:
            provider: Embedding model provider
            model_id: Model used for every chunk of the ingestion

        Raises:
            ValueError: When model_id is empty
        """
        if not model_id:
            raise ValueError("model_id cannot be empty")
        self._provider = provider
        self._model_id = model_id

    @property
    def model_id(self) -> str:
        return self._model_id

    async def embed(self, chunks: list[DocumentChunk]) -> list[list[float]]:
        """
        Embed chunks sequentially.

        Args:
            chunks: Chunks to embed

        Returns:
            list[list[float]]: One vector per chunk, in input order

        Raises:
            NotFoundError: If the model is unknown
            UpstreamError: When a provider call fails after retries
        """
        vectors: list[list[float]] = []
        for chunk in chunks:
            vector = await self._provider.embed(chunk.text, self._model_id)
            if not vector:
                raise UpstreamError(
                    f"Embedding model {self._model_id} returned an empty vector",
                    service="embedding",
                    details={"chunk_index": chunk.index, "source": chunk.source},
                )
            vectors.append(vector)
        return vectors
