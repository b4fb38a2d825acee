"""
Tests for health endpoints, correlation IDs and error mapping.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from vectorhub.api.deps import get_service_cache
from vectorhub.api.errors import status_code_for
from vectorhub.core.exceptions import (
    ConfigurationError,
    InvalidStateError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    VectorHubError,
)


def test_health_check(client) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_correlation_id_is_echoed(client) -> None:
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-123"})

    assert response.headers["X-Correlation-ID"] == "req-123"


def test_correlation_id_is_generated(client) -> None:
    response = client.get("/api/v1/health")

    assert response.headers["X-Correlation-ID"]


def test_db_health_ok(app, client) -> None:
    session = AsyncMock()
    cache = MagicMock()
    cache.session_factory.return_value.__aenter__.return_value = session
    app.dependency_overrides[get_service_cache] = lambda: cache

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    session.execute.assert_awaited_once()


def test_db_health_down_should_return_502(app, client) -> None:
    cache = MagicMock()
    cache.session_factory.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    app.dependency_overrides[get_service_cache] = lambda: cache

    response = client.get("/api/v1/health/db")

    assert response.status_code == 502
    assert response.json()["details"] == {"service": "database"}


@pytest.mark.parametrize(
    "exc,expected",
    [
        (ValidationError("bad"), 400),
        (NotFoundError("job", "x"), 404),
        (InvalidStateError("nope"), 409),
        (UpstreamError("down"), 502),
        (ConfigurationError("missing"), 500),
        (VectorHubError("other"), 500),
    ],
)
def test_status_code_for(exc, expected) -> None:
    assert status_code_for(exc) == expected
