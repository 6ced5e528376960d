"""Fixtures for route tests."""

import pytest
from fastapi.testclient import TestClient

from portal.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def api():
    """Test client over a fully mocked container.

    Leaving the client runs the lifespan, which closes the container.
    """
    app = create_app(build_test_container(fastapi=True))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def resolve(api):
    """Resolve an APP-scoped dependency on the client's event loop."""
    container = api.app.state.dishka_container

    def _resolve(dependency_type):
        return api.portal.call(container.get, dependency_type)

    return _resolve
