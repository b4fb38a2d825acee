"""
Test suite for LangChainEmbeddingProvider.

Provider calls go to stub LangChain Embeddings; retries run with zero
backoff.

System role: Verification of model lookup, retry and error wrapping
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from vectorhub.boundary.embeddings.embedding_provider import LangChainEmbeddingProvider
from vectorhub.configs.embeddings import EmbeddingSettings
from vectorhub.core.exceptions import ConfigurationError, NotFoundError, UpstreamError


@pytest.fixture
def settings() -> EmbeddingSettings:
    return EmbeddingSettings(
        _env_file=None,
        default_model_id="fake-small",
        models={"fake-small": "fake", "mystery": "carrier-pigeon"},
        dimension=16,
        retry_attempts=3,
        retry_max_wait_seconds=0,
    )


class TestModelLookup:
    """Test suite for get_embeddings()."""

    @pytest.mark.asyncio
    async def test_fake_provider_should_return_configured_dimension(self, settings) -> None:
        provider = LangChainEmbeddingProvider(settings)

        vector = await provider.embed("hello", "fake-small")

        assert len(vector) == 16
        assert vector == await provider.embed("hello", "fake-small")

    def test_unknown_model_should_raise_not_found(self, settings) -> None:
        provider = LangChainEmbeddingProvider(settings)

        with pytest.raises(NotFoundError):
            provider.get_embeddings("nonexistent")

    def test_unknown_provider_should_raise_configuration_error(self, settings) -> None:
        provider = LangChainEmbeddingProvider(settings)

        with pytest.raises(ConfigurationError):
            provider.get_embeddings("mystery")

    def test_prebuilt_embeddings_should_be_used(self, settings) -> None:
        prebuilt = DeterministicFakeEmbedding(size=4)
        provider = LangChainEmbeddingProvider(settings, embeddings={"custom": prebuilt})

        assert provider.get_embeddings("custom") is prebuilt


class TestRetry:
    """Test suite for embed() retry behaviour."""

    @pytest.mark.asyncio
    async def test_transient_failure_should_be_retried(self, settings) -> None:
        # Arrange
        stub = MagicMock()
        stub.aembed_query = AsyncMock(side_effect=[TimeoutError("slow"), [0.1, 0.2]])
        provider = LangChainEmbeddingProvider(settings, embeddings={"m": stub})

        # Act
        vector = await provider.embed("text", "m")

        # Assert
        assert vector == [0.1, 0.2]
        assert stub.aembed_query.await_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_retries_should_raise_upstream_error(self, settings) -> None:
        # Arrange
        stub = MagicMock()
        stub.aembed_query = AsyncMock(side_effect=RuntimeError("throttled"))
        provider = LangChainEmbeddingProvider(settings, embeddings={"m": stub})

        # Act
        with pytest.raises(UpstreamError) as exc_info:
            await provider.embed("text", "m")

        # Assert
        assert stub.aembed_query.await_count == 3
        assert exc_info.value.details["attempts"] == 3
