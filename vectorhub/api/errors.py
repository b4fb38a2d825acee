"""
Exception handlers.

Maps the VectorHubError taxonomy onto HTTP status codes.

Dependencies: fastapi, vectorhub.core.exceptions
System role: Error translation at the HTTP boundary
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vectorhub.core.exceptions import (
    ConfigurationError,
    InvalidStateError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    VectorHubError,
)
from vectorhub.models.common import ErrorResponse
from vectorhub.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[VectorHubError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    InvalidStateError: 409,
    UpstreamError: 502,
    ConfigurationError: 500,
}


def status_code_for(exc: VectorHubError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return 500


async def vectorhub_error_handler(request: Request, exc: VectorHubError) -> JSONResponse:
    status_code = status_code_for(exc)
    log_with_context(
        logger,
        logging.ERROR if status_code >= 500 else logging.INFO,
        f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}",
        status_code=status_code,
        details=exc.details,
    )
    body = ErrorResponse(
        error=exc.message,
        error_type=type(exc).__name__,
        details=exc.details or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VectorHubError, vectorhub_error_handler)
