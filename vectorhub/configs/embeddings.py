"""
Embedding provider configuration settings.

Maps embedding model IDs to the LangChain provider that serves them and
controls the retry/backoff policy around provider calls.

Dependencies: pydantic, pydantic_settings
System role: Embedding model provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from vectorhub.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding model provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    default_model_id: str = Field(
        default="amazon.titan-embed-text-v2:0",
        description="Model used when a request does not name one",
    )
    models: dict[str, str] = Field(
        default_factory=lambda: {
            "amazon.titan-embed-text-v2:0": "bedrock",
            "models/gemini-embedding-001": "google",
        },
        description="Known model IDs mapped to provider name (bedrock, google)",
    )
    dimension: int = Field(
        default=1024,
        gt=0,
        description="Output dimensionality requested from providers that support it",
    )
    bedrock_region: str = Field(
        default="us-east-1",
        description="AWS region for Bedrock embeddings",
    )

    retry_attempts: int = Field(
        default=5,
        ge=1,
        description="Maximum attempts per embedding call",
    )
    retry_max_wait_seconds: float = Field(
        default=30.0,
        description="Upper bound for exponential backoff between attempts",
    )
