"""
Observability module.

Provides logging configuration, correlation ID tracking and HTTP middleware.
"""

from vectorhub.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from vectorhub.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
