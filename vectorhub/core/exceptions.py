"""
Exception hierarchy for the vectorhub service.

Provides the error taxonomy shared by ingestion, job tracking and analytics.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class VectorHubError(Exception):
    """Base exception for all vectorhub errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(VectorHubError):
    """Raised when input validation fails (chunking params, job type, dimensions)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class NotFoundError(VectorHubError):
    """Raised when a job, model, collection or vector cannot be found."""

    def __init__(
        self,
        resource: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Kind of resource (job, model, vector, collection)
            identifier: Identifier that was looked up
            details: Additional context
        """
        details = details or {}
        details["resource"] = resource
        details["identifier"] = str(identifier)
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource.capitalize()} not found: {identifier}", details)


class InvalidStateError(VectorHubError):
    """Raised when a job state transition is not allowed."""

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        action: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid state error.

        Args:
            message: Error message
            current_status: Status the job was in when the action was attempted
            action: Attempted action (cancel, retry, process)
            details: Additional context
        """
        details = details or {}
        if current_status:
            details["current_status"] = current_status
        if action:
            details["action"] = action
        self.current_status = current_status
        self.action = action
        super().__init__(message, details)


class UpstreamError(VectorHubError):
    """Raised when the embedding model, blob storage or database call fails."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            service: Upstream service that failed (embedding, storage, database)
            details: Additional context
        """
        details = details or {}
        if service:
            details["service"] = service
        self.service = service
        super().__init__(message, details)


class ConfigurationError(VectorHubError):
    """Raised when required external configuration is missing."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        self.setting = setting
        super().__init__(message, details)
