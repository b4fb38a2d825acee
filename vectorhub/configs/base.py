"""
Shared settings base for vectorhub.

Every vectorhub settings group (database, embeddings, storage, ingestion,
analytics) reads the same .env file, ignores keys that belong to other
groups, and carries the service log level.

Dependencies: pydantic_settings
System role: Common parent of the vectorhub settings groups
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Common vectorhub settings: .env loading and the root log level."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level
