"""
Embedding model provider.

Resolves a model ID to a LangChain Embeddings instance and embeds one text
per call with bounded exponential backoff. Provider instances are created
lazily and reused for the lifetime of the provider object.

Dependencies: langchain_core, langchain_aws, langchain_google_genai, tenacity
System role: Embedding model boundary for ingestion and text search
"""

import logging
from typing import Protocol

from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from vectorhub.configs.embeddings import EmbeddingSettings
from vectorhub.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    UpstreamError,
    VectorHubError,
)

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Maps text to a fixed-length vector for a named model."""

    async def embed(self, text: str, model_id: str) -> list[float]: ...


class LangChainEmbeddingProvider:
    """
    Embedding provider backed by LangChain embedding integrations.

    Known providers: "bedrock" (BedrockEmbeddings), "google"
    (FixedDimensionEmbeddings), "fake" (DeterministicFakeEmbedding, for
    local development without credentials).
    """

    def __init__(
        self,
        settings: EmbeddingSettings,
        embeddings: dict[str, Embeddings] | None = None,
    ) -> None:
        """
        Initialize provider registry.

        Args:
            settings: Model registry and retry policy
            embeddings: Pre-built Embeddings per model ID (skips lazy creation)
        """
        self._settings = settings
        self._embeddings: dict[str, Embeddings] = dict(embeddings or {})

    @property
    def default_model_id(self) -> str:
        return self._settings.default_model_id

    def _build(self, model_id: str, provider: str) -> Embeddings:
        if provider == "bedrock":
            from langchain_aws import BedrockEmbeddings

            return BedrockEmbeddings(
                model_id=model_id,
                region_name=self._settings.bedrock_region,
            )
        if provider == "google":
            from vectorhub.boundary.embeddings.embeddings_wrapper import (
                FixedDimensionEmbeddings,
            )

            return FixedDimensionEmbeddings(
                model=model_id,
                output_dimensionality=self._settings.dimension,
            )
        if provider == "fake":
            return DeterministicFakeEmbedding(size=self._settings.dimension)
        raise ConfigurationError(
            f"Unknown embedding provider '{provider}' for model {model_id}",
            setting="EMBEDDING_MODELS",
        )

    def get_embeddings(self, model_id: str) -> Embeddings:
        """
        Return the Embeddings instance serving model_id.

        Raises:
            NotFoundError: If model_id is not registered
            ConfigurationError: If the registered provider is unknown
        """
        if model_id in self._embeddings:
            return self._embeddings[model_id]
        provider = self._settings.models.get(model_id)
        if provider is None:
            raise NotFoundError("model", model_id)
        logger.info(f"{__name__}:get_embeddings - Creating {provider} embeddings for {model_id}")
        self._embeddings[model_id] = self._build(model_id, provider)
        return self._embeddings[model_id]

    async def embed(self, text: str, model_id: str) -> list[float]:
        """
        Embed one text with retry and exponential backoff.

        Raises:
            NotFoundError: If model_id is not registered
            UpstreamError: After retries are exhausted
        """
        embeddings = self.get_embeddings(model_id)
        attempts = self._settings.retry_attempts

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_not_exception_type(VectorHubError),
                stop=stop_after_attempt(attempts),
                wait=wait_exponential_jitter(
                    initial=1, max=self._settings.retry_max_wait_seconds, jitter=1
                ),
                before_sleep=lambda retry_state: logger.warning(
                    f"{__name__}:embed - Retry {retry_state.attempt_number}/{attempts} "
                    f"for model {model_id}"
                ),
                reraise=True,
            ):
                with attempt:
                    vector = await embeddings.aembed_query(text)
        except VectorHubError:
            raise
        except Exception as e:
            logger.error(f"{__name__}:embed - {type(e).__name__} after {attempts} attempts: {e}")
            raise UpstreamError(
                f"Embedding model {model_id} failed: {e}",
                service="embedding",
                details={"model_id": model_id, "attempts": attempts},
            ) from e

        return [float(v) for v in vector]
