"""Shared fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from productsearch.api.dependencies import get_search_client
from productsearch.main import app
from tests.conftest import FakeElasticsearch


@pytest.fixture
def client(fake_es: FakeElasticsearch) -> Generator[TestClient, None, None]:
    """Create test client backed by the fake index engine."""
    app.dependency_overrides[get_search_client] = lambda: fake_es
    yield TestClient(app)
    app.dependency_overrides.clear()
