"""
API test fixtures.

Routers are exercised with TestClient; services are replaced through
app.dependency_overrides so no database is touched.
"""

import pytest
from fastapi.testclient import TestClient

from vectorhub.api.main import create_app


@pytest.fixture
def app():
    app = create_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
