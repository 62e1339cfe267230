from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.catalog.service import CatalogService
from app.catalog.store import create_store
from app.config import Settings
from app.main import create_app

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return create_store(seed=True)


@pytest.fixture
def service(store):
    return CatalogService(store, clock=lambda: NOW)


def _client(service, **overrides):
    settings = Settings(_env_file=None, **overrides)
    return TestClient(create_app(settings=settings, catalog=service))


@pytest.fixture
def client(service):
    return _client(service)


@pytest.fixture
def strict_client(service):
    return _client(service, strict_error_status=True)
